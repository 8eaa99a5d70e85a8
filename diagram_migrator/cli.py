"""Typer-based CLI for checking and upgrading saved diagrams."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__, config, config_manager
from .cli_groups import config_grp
from .document import load_document, save_document
from .errors import MigrationError
from .migrator import Migrator
from .models import MigrationOptions
from .rules import default_rules
from .version import version_of

console = Console()

app = typer.Typer(
    help="🗂️  dmig — upgrade diagrams saved by older schema versions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config_grp, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"dmig v{__version__} (schema {config.CURRENT_VERSION})")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log each rewrite rule as it runs."),
):
    """dmig: load diagrams written by older releases and bring them up to date."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _fail(error: MigrationError, path: Path) -> None:
    typer.echo(f"❌ Cannot load '{path}': {type(error).__name__}: {error}", err=True)
    raise typer.Exit(code=1)


def _options(flag_every_association: Optional[bool]) -> MigrationOptions:
    options = config_manager.migration_options()
    if flag_every_association is not None:
        options = dataclasses.replace(options, flag_every_association=flag_every_association)
    return options


@app.command("check")
def check(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved diagram file."),
):
    """Report whether a saved diagram needs migration."""
    try:
        document = load_document(path)
        declared = version_of(document)
    except MigrationError as exc:
        _fail(exc, path)

    migrator = Migrator(current_version=config.CURRENT_VERSION)
    typer.echo(f"File: {path}")
    typer.echo(f"Declared version: {declared}")
    typer.echo(f"Current version: {config.CURRENT_VERSION}")
    if migrator.needs_migration(document):
        typer.echo("Migration needed: yes")
    else:
        typer.echo("Migration needed: no")


@app.command("migrate")
def migrate_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved diagram file."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the upgraded document here."),
    in_place: bool = typer.Option(False, "--in-place", "-i", help="Overwrite the input file."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Migrate and decode without writing anything."),
    flag_every_association: Optional[bool] = typer.Option(
        None,
        "--legacy-flag/--strict-flag",
        help="Count every association as migrated (legacy) or only renamed ones (strict).",
    ),
):
    """Migrate a saved diagram to the current schema and decode it."""
    if in_place and output is not None:
        raise typer.BadParameter("Use either --output or --in-place, not both.")

    migrator = Migrator(options=_options(flag_every_association), current_version=config.CURRENT_VERSION)
    try:
        result = migrator.load(path)
    except MigrationError as exc:
        _fail(exc, path)

    typer.echo(f"Loaded '{path}' (version {result.version})")
    typer.echo(result.summary)
    typer.echo(f"Nodes: {len(result.diagram.nodes)} | Edges: {len(result.diagram.edges)}")

    if result.applied_rules:
        table = Table(title="Applied rules")
        table.add_column("#", justify="right")
        table.add_column("Rule", no_wrap=True)
        for position, name in enumerate(result.applied_rules, 1):
            table.add_row(str(position), name)
        console.print(table)

    target = path if in_place else output
    if target is None or dry_run:
        return
    if not result.migrated:
        typer.echo("Nothing to write; the document is already current.")
        return
    save_document(result.document, target, config.CURRENT_VERSION)
    typer.echo(f"Wrote upgraded document to {target}")


@app.command("rules")
def list_rules():
    """List the rewrite rules in the order they run."""
    table = Table(title="Rewrite rules")
    table.add_column("#", justify="right")
    table.add_column("Rule", no_wrap=True, style="cyan")
    table.add_column("Description")
    for position, rule in enumerate(default_rules(), 1):
        table.add_row(str(position), rule.name, rule.description)
    console.print(table)


@config_grp.command("show")
def show_config():
    """Show the effective migration options."""
    options = config_manager.migration_options()
    typer.echo(f"Config file: {config_manager.CONFIG_FILE}")
    for field in dataclasses.fields(options):
        typer.echo(f"{field.name} = {str(getattr(options, field.name)).lower()}")


@config_grp.command("set")
def set_config(
    key: str = typer.Argument(..., help="Option name, e.g. flag_every_association."),
    value: str = typer.Argument(..., help="New value (true/false)."),
):
    """Persist one migration option."""
    try:
        options = config_manager.save_migration_option(key, value)
    except KeyError:
        choices = ", ".join(config_manager.option_names())
        raise typer.BadParameter(f"Unknown option '{key}'. Choose from: {choices}")
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    typer.echo(f"Set {key} = {str(getattr(options, key)).lower()}")


@config_grp.command("reset")
def reset_config():
    """Restore default migration options."""
    config_manager.clear_migration_config()
    typer.echo("Migration options reset to defaults.")


if __name__ == "__main__":
    app()
