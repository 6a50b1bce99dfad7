"""Build command: analyze a JAR and link a trimmed runtime image."""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ..api import analyze as run_analysis
from ..api import build_runtime_image
from ..exceptions import InvalidConfigError, JreTrimError
from ..logging_config import setup_logging
from ..user_config import (
    DEFAULT_CONFIG_PATH,
    UserConfig,
    load_user_config,
    save_user_config,
)
from . import app
from ._common import console, resolve_config


def _progress_bar() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(bar_width=40, complete_style="cyan", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


@app.command()
def build(
    jar: Path = typer.Argument(
        ...,
        help="JAR file to package",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Directory that receives the runtime image (default: last saved)",
        file_okay=False,
    ),
    javafx_sdk: Optional[Path] = typer.Option(
        None,
        "--javafx-sdk",
        help="JavaFX SDK directory (its javafx-jmods are added to the module path)",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    compress_level: Optional[int] = typer.Option(
        None,
        "--compress-level",
        help="jlink compression level (default: last saved, else 2)",
        min=0,
        max=2,
    ),
    compress: Optional[bool] = typer.Option(
        None, "--compress/--no-compress", help="Compress the image", show_default=False
    ),
    keep_debug: Optional[bool] = typer.Option(
        None, "--keep-debug/--strip-debug", help="Keep debug attributes", show_default=False
    ),
    keep_man_pages: Optional[bool] = typer.Option(
        None, "--keep-man-pages/--no-man-pages", help="Keep man pages", show_default=False
    ),
    keep_headers: Optional[bool] = typer.Option(
        None, "--keep-headers/--no-header-files", help="Keep C header files", show_default=False
    ),
    no_advanced: bool = typer.Option(
        False,
        "--no-advanced",
        help="Skip the instrumentation, native, crypto and enterprise heuristics",
    ),
    jdk: Optional[Path] = typer.Option(
        None,
        "--jdk",
        help="JDK home providing jlink and jmods",
        file_okay=False,
        dir_okay=True,
    ),
    save_config: bool = typer.Option(
        False,
        "--save-config",
        help=f"Remember these choices in {DEFAULT_CONFIG_PATH}",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="TOML configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Errors only"),
):
    """
    Analyze a JAR and link a runtime image containing only what it needs.

    The image is written to OUTPUT/library; an existing one is replaced.
    Options not given on the command line fall back to the choices saved
    with --save-config.

    [bold cyan]Examples:[/bold cyan]

      jre-trim build app.jar -o dist

      jre-trim build fx.jar -o dist --javafx-sdk ~/javafx-sdk-21 --compress-level 1
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        remembered = _apply_flags(
            load_user_config(),
            javafx_sdk=javafx_sdk,
            compress=compress,
            compress_level=compress_level,
            keep_debug=keep_debug,
            keep_man_pages=keep_man_pages,
            keep_headers=keep_headers,
        )
        if output is None and remembered.output_directory:
            output = Path(remembered.output_directory)
        if output is None:
            raise InvalidConfigError("output", None, "no output directory given, pass -o")
        output = output.absolute()

        settings = resolve_config(config, jdk=jdk, verbose=verbose, quiet=quiet)
        build_config = remembered.to_build_configuration(
            output, enable_advanced_features=not no_advanced
        )

        with _progress_bar() as progress:
            analysis_task = progress.add_task("Analyzing", total=100)
            result = run_analysis(
                jar,
                on_progress=lambda pct: progress.update(analysis_task, completed=pct),
                build_config=build_config,
                config=settings,
            )
            progress.update(analysis_task, completed=100)

            link_task = progress.add_task("Linking", total=100)
            report = build_runtime_image(
                result,
                build_config,
                on_progress=lambda pct: progress.update(link_task, completed=pct),
                config=settings,
            )

    except JreTrimError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Build interrupted[/yellow]")
        raise typer.Exit(130)

    console.print()
    console.print(f"[green]Runtime image:[/green] {report.output_dir}")
    console.print(f"  modules: {len(report.modules)}")
    console.print(f"  size:    {report.formatted_size}")

    if save_config:
        stored = replace(remembered, archive_path=str(jar), output_directory=str(output))
        if not save_user_config(stored):
            console.print(f"[yellow]Could not save settings to {DEFAULT_CONFIG_PATH}[/yellow]")


def _apply_flags(
    remembered: UserConfig,
    javafx_sdk: Optional[Path],
    compress: Optional[bool],
    compress_level: Optional[int],
    keep_debug: Optional[bool],
    keep_man_pages: Optional[bool],
    keep_headers: Optional[bool],
) -> UserConfig:
    """Overlay the flags actually given on the command line onto saved choices."""
    options = remembered.build
    if compress is not None:
        options = replace(options, compress=compress)
    if compress_level is not None:
        options = replace(options, compression_level=compress_level)
    if keep_debug is not None:
        options = replace(options, strip_debug=not keep_debug)
    if keep_man_pages is not None:
        options = replace(options, no_man_pages=not keep_man_pages)
    if keep_headers is not None:
        options = replace(options, no_header_files=not keep_headers)

    merged = replace(remembered, build=options)
    if javafx_sdk is not None:
        merged = replace(merged, enable_javafx=True, javafx_sdk_path=str(javafx_sdk))
    return merged
