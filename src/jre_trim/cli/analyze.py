"""Analyze command: print the module set of a JAR."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..api import analyze as run_analysis
from ..exceptions import JreTrimError
from ..logging_config import setup_logging
from ..models import BuildConfiguration
from . import app
from ._common import console, print_summary, resolve_config


@app.command()
def analyze(
    jar: Path = typer.Argument(
        ...,
        help="JAR file to analyze",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    no_advanced: bool = typer.Option(
        False,
        "--no-advanced",
        help="Skip the instrumentation, native, crypto and enterprise heuristics",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto-detect)",
        min=1,
        max=32,
    ),
    jdk: Optional[Path] = typer.Option(
        None,
        "--jdk",
        help="JDK home used for the jdeps fallback",
        file_okay=False,
        dir_okay=True,
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
    Work out which Java platform modules a JAR needs.

    [bold cyan]Examples:[/bold cyan]

      jre-trim analyze app.jar

      jre-trim analyze app.jar --json --no-advanced
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(config, workers=workers, jdk=jdk, verbose=verbose, quiet=quiet)
        build_config = None
        if no_advanced:
            build_config = BuildConfiguration(
                output_path=Path.cwd(), enable_advanced_features=False
            )
        result = run_analysis(jar, build_config=build_config, config=settings)

    except JreTrimError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    if json_output:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_summary(result)
