"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..config import AnalysisConfig, load_config
from ..models import AnalysisResult

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    jdk: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build analysis config from CLI options."""
    return load_config(
        config_file=config,
        workers=workers,
        jdk_home=jdk,
        verbose=verbose,
        quiet=quiet,
    )


def print_summary(result: AnalysisResult) -> None:
    """Render archive facts, modules and fired rules."""
    archive = result.archive

    facts = Table(show_header=False, box=None, padding=(0, 2))
    facts.add_column(style="dim")
    facts.add_column()
    facts.add_row("Archive", str(archive.path))
    facts.add_row("Size", archive.formatted_size)
    facts.add_row("Main class", archive.main_class or "-")
    facts.add_row("Classes", f"{result.classes_processed} of {result.classes_total} parsed")
    facts.add_row("Spring Boot", "yes" if archive.is_spring_boot else "no")
    facts.add_row("JavaFX", "required" if result.requires_javafx else "no")
    if result.nested_archives:
        facts.add_row("Nested libraries", str(len(result.nested_archives)))
    if result.supplemented:
        facts.add_row("jdeps", "consulted")
    facts.add_row("Elapsed", f"{result.elapsed_seconds:.2f}s")
    console.print(facts)
    console.print()

    console.print(f"[bold]Modules ({len(result.modules)})[/bold]")
    for module in result.sorted_modules:
        console.print(f"  {module}")

    if result.fired_rules:
        console.print()
        rules = Table(title="Heuristic rules", title_justify="left")
        rules.add_column("Rule", style="cyan")
        rules.add_column("Added")
        for name, added in result.fired_rules.items():
            rules.add_row(name, ", ".join(added) if added else "[dim](already present)[/dim]")
        console.print(rules)

    if result.failed_classes:
        console.print()
        console.print(
            f"[yellow]{len(result.failed_classes)} class file(s) could not be parsed[/yellow]"
        )
