"""Main CLI entry point for recordkit."""

from pathlib import Path
from typing import Optional

import typer

from recordkit.cli.commands import snapshot, inflect

app = typer.Typer(
    name="recordkit",
    help="recordkit - typed in-memory record stores with JSON snapshots",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default: from config)"
    ),
):
    """
    recordkit - typed in-memory record stores with JSON snapshots
    """
    from recordkit.cli.utils import configure_logging, get_config_with_data

    if ctx.invoked_subcommand is None:
        # No subcommand was invoked, show help
        print(ctx.get_help())
        raise typer.Exit(0)

    if log_level is None:
        _, config_data = get_config_with_data()
        log_level = config_data.log_level
    configure_logging(log_level)


# Add command groups
app.add_typer(snapshot.app, name="snapshot", help="Snapshot inspection commands")
app.add_typer(inflect.app, name="inflect", help="Word inflection commands")


@app.command()
def init(
    path: Optional[Path] = typer.Argument(
        None, help="Directory to initialize project in (default: current directory)"
    ),
):
    """Initialize a new recordkit project."""
    from recordkit.config import Config

    project_path = path or Path.cwd()
    config = Config(project_path)

    try:
        config_data = config.init_project()
        typer.secho(
            f"✅ Initialized recordkit project in {project_path}", fg=typer.colors.GREEN
        )
        typer.secho(f"   Snapshots: {config_data.snapshot_dir}", fg=typer.colors.CYAN)
    except FileExistsError:
        typer.secho(f"❌ Project already exists in {project_path}", fg=typer.colors.RED)
        raise typer.Exit(1)


@app.command()
def version():
    """Show recordkit version."""
    from recordkit import __version__

    typer.echo(f"recordkit version {__version__}")


@app.command()
def status():
    """Show recordkit status including configuration and environment variables."""
    from recordkit.cli.utils import get_config_with_data, show_env_config
    from rich.console import Console

    console = Console()

    try:
        config, config_data = get_config_with_data()

        console.print("\n[bold]recordkit Status[/bold]")
        console.print(f"Project: {config.project_dir}")
        if config.exists:
            console.print(f"Config: {config.config_path}")
        else:
            console.print("Config: [dim]None (defaults)[/dim]")
        console.print(f"Snapshot directory: {config.snapshot_dir}")
        console.print(f"Notification channel: {config_data.notification_channel}")
        console.print(f"Log level: {config_data.log_level}")

        inflections = config_data.inflections
        if inflections.irregular or inflections.uncountable:
            console.print(
                f"Extra inflections: {len(inflections.irregular)} irregular, "
                f"{len(inflections.uncountable)} uncountable"
            )

        # Show environment variables
        show_env_config()

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
