"""Snapshot inspection commands for recordkit CLI."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table as RichTable

from recordkit.cli.utils import read_snapshot, validate_required_arg
from recordkit.managers.form import display_value

app = typer.Typer(help="Snapshot inspection commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def info(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Snapshot file"),
):
    """Show the model, columns and record count of a snapshot."""
    path = validate_required_arg(path, "path", ctx)
    snapshot = read_snapshot(path)

    console.print(f"\n[bold]Snapshot of {snapshot.model}[/bold]")
    console.print(f"Format version: {snapshot.format_version}")
    console.print(f"Saved at: {snapshot.saved_at.isoformat()}")
    console.print(f"Records: {len(snapshot.records)}")
    console.print(f"Next id: {snapshot.next_id}")

    table = RichTable(title="Columns", title_justify="left")
    table.add_column("#", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Default", style="yellow")

    for column in snapshot.columns:
        default = display_value(column.default) if column.has_default else "-"
        table.add_row(str(column.ordinal), column.name, column.type, default)

    console.print(table)


@app.command()
def show(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Snapshot file"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", help="Limit number of records"
    ),
    format: str = typer.Option(
        "table", "--format", "-f", help="Output format (table, json)"
    ),
):
    """Show the records stored in a snapshot."""
    path = validate_required_arg(path, "path", ctx)
    snapshot = read_snapshot(path)

    records = snapshot.records
    if limit is not None:
        if limit < 0:
            console.print("[red]❌ Limit must not be negative[/red]")
            raise typer.Exit(1)
        records = records[:limit]

    if format == "json":
        console.print_json(json.dumps(records, default=str))
        return
    if format != "table":
        console.print(f"[red]❌ Unknown format '{format}'. Use table or json.[/red]")
        raise typer.Exit(1)

    if not records:
        console.print(f"[yellow]No {snapshot.model} records in snapshot[/yellow]")
        return

    names = ["id", *[column.name for column in snapshot.columns]]
    table = RichTable(title=f"{snapshot.model} records", title_justify="left")
    for name in names:
        table.add_column(name, style="cyan" if name == "id" else None)

    for record in records:
        table.add_row(*[display_value(record.get(name)) for name in names])

    console.print(table)
    if limit is not None and len(snapshot.records) > limit:
        console.print(f"[dim]Showing {limit} of {len(snapshot.records)} records[/dim]")
