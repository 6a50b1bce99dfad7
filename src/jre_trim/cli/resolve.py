"""Resolve command: look up the module of type or package names."""

from typing import List, Optional

import typer
from rich.table import Table

from ..resolution import known_modules, known_packages, modules_for_packages, modules_for_types
from . import app
from ._common import console


@app.command()
def resolve(
    names: Optional[List[str]] = typer.Argument(
        None, help="Fully qualified type names (package names with --packages)"
    ),
    packages: bool = typer.Option(
        False, "-p", "--packages", help="Treat NAMES as package names"
    ),
    list_module: Optional[str] = typer.Option(
        None, "--list", metavar="MODULE", help="List the packages mapped to MODULE"
    ),
):
    """
    Print the platform module each type or package belongs to.

    [bold cyan]Examples:[/bold cyan]

      jre-trim resolve java.sql.Connection javax.swing.JFrame

      jre-trim resolve --packages java.util.logging javax.naming

      jre-trim resolve --list java.sql
    """
    if list_module is not None:
        listed = known_packages(list_module)
        if not listed:
            console.print(f"[red]Error:[/red] no packages known for module {list_module!r}")
            console.print(f"[dim]Known modules: {', '.join(known_modules())}[/dim]")
            raise typer.Exit(1)
        for package in listed:
            console.print(package)
        return

    if not names:
        console.print("[red]Error:[/red] give type names, or --list MODULE")
        raise typer.Exit(1)

    table = Table(show_header=True)
    table.add_column("Package" if packages else "Type")
    table.add_column("Module", style="cyan")

    if packages:
        for package in names:
            found = modules_for_packages([package])
            table.add_row(package, ", ".join(sorted(found)) or "[dim]unknown[/dim]")
        console.print(table)
        required = sorted(modules_for_packages(names))
        console.print(f"[bold]Modules:[/bold] {', '.join(required) or 'none'}")
        return

    for name, module in modules_for_types(names).items():
        table.add_row(name, module or "[dim]unknown[/dim]")
    console.print(table)
