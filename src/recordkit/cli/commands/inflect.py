"""Inflection commands for recordkit CLI."""

from typing import Optional

import typer
from rich.console import Console

from recordkit.cli.utils import get_config_with_data, validate_required_arg
from recordkit.utils.inflection import Inflector

app = typer.Typer(help="Word inflection commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


def project_inflector() -> Inflector:
    """Default inflector extended with the project's configured rules."""
    _, config_data = get_config_with_data()
    return Inflector().with_rules(
        irregulars=config_data.inflections.irregular,
        uncountables=config_data.inflections.uncountable,
    )


@app.command()
def pluralize(
    ctx: typer.Context,
    word: Optional[str] = typer.Argument(None, help="Word to pluralize"),
):
    """Print the plural form of a word."""
    word = validate_required_arg(word, "word", ctx)
    typer.echo(project_inflector().pluralize(word))


@app.command()
def singularize(
    ctx: typer.Context,
    word: Optional[str] = typer.Argument(None, help="Word to singularize"),
):
    """Print the singular form of a word."""
    word = validate_required_arg(word, "word", ctx)
    typer.echo(project_inflector().singularize(word))


@app.command()
def humanize(
    ctx: typer.Context,
    word: Optional[str] = typer.Argument(None, help="Attribute name"),
):
    """Print the form label of an attribute name."""
    word = validate_required_arg(word, "word", ctx)
    typer.echo(project_inflector().humanize(word))


@app.command()
def titleize(
    ctx: typer.Context,
    word: Optional[str] = typer.Argument(None, help="Attribute name"),
):
    """Print an attribute name with every word capitalized."""
    word = validate_required_arg(word, "word", ctx)
    typer.echo(project_inflector().titleize(word))


@app.command(name="foreign-key")
def foreign_key(
    ctx: typer.Context,
    model: Optional[str] = typer.Argument(None, help="Model type name"),
):
    """Print the default foreign key column for a model type."""
    model = validate_required_arg(model, "model", ctx)
    typer.echo(project_inflector().foreign_key(model))
