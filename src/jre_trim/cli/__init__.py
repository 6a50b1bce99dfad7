"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="jre-trim",
    help="jre-trim - derive the Java modules a JAR needs and link a trimmed runtime",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]jre-trim[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Analyze JAR bytecode and build minimal runtime images with jlink."""


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .build import build as _build  # noqa: F401, E402
from .resolve import resolve as _resolve  # noqa: F401, E402
