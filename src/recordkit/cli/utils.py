"""Utility functions for CLI commands."""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from recordkit.config import Config, ProjectConfig
from recordkit.core.errors import SnapshotError
from recordkit.managers.snapshot import load_snapshot
from recordkit.models.snapshot import StoreSnapshot

console = Console()


def get_config_with_data(project_dir: Optional[Path] = None) -> Tuple[Config, ProjectConfig]:
    """Get config and load data, falling back to defaults outside a project.

    Returns:
        tuple: (config, config_data)
    """
    config = Config(project_dir)
    try:
        config_data = config.load_or_default()
    except Exception as e:
        console.print(
            f"[red]❌ Invalid config at {config.config_path}: {escape(str(e))}[/red]"
        )
        raise typer.Exit(1)
    return config, config_data


def configure_logging(level: str) -> None:
    """Send library logging to stderr at the given level name."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        console.print(f"[yellow]Unknown log level '{level}', using WARNING[/yellow]")
        numeric = logging.WARNING
    logging.basicConfig(
        level=numeric, format="%(levelname)s %(name)s: %(message)s", force=True
    )


def resolve_snapshot_path(path: Path, config: Config) -> Path:
    """Resolve a relative snapshot path the way a Database would."""
    path = path.expanduser()
    if path.is_absolute() or path.exists():
        return path
    return config.snapshot_dir / path


def read_snapshot(path: Path) -> StoreSnapshot:
    """Load a snapshot file, exiting with a readable error on failure."""
    config, _ = get_config_with_data()
    resolved = resolve_snapshot_path(path, config)
    try:
        return load_snapshot(resolved)
    except FileNotFoundError:
        console.print(f"[red]❌ Snapshot file not found: {escape(str(resolved))}[/red]")
        raise typer.Exit(1)
    except SnapshotError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(1)


def validate_required_arg(
    value: Optional[str], arg_name: str, ctx: typer.Context
) -> str:
    """Validate a required argument and show help if missing.

    Args:
        value: The argument value
        arg_name: Name of the argument (for error message)
        ctx: Typer context

    Returns:
        The validated value

    Raises:
        typer.Exit: If value is None
    """
    if value is None:
        console.print(ctx.get_help())
        console.print(f"\n[red]❌ Error: Missing argument '{arg_name.upper()}'.[/red]")
        raise typer.Exit(1)
    return value


def show_env_config():
    """Display active environment variable configuration."""
    env_vars = {
        "RECORDKIT_PROJECT_DIR": os.environ.get("RECORDKIT_PROJECT_DIR"),
        "RECORDKIT_SNAPSHOT_DIR": os.environ.get("RECORDKIT_SNAPSHOT_DIR"),
        "RECORDKIT_LOG_LEVEL": os.environ.get("RECORDKIT_LOG_LEVEL"),
    }

    active = {k: v for k, v in env_vars.items() if v}
    if active:
        console.print("\n[yellow]Active environment variables:[/yellow]")
        for key, value in active.items():
            console.print(f"  {key}={value}")
    else:
        console.print("\n[dim]No recordkit environment variables set[/dim]")
