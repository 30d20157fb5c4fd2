"""
Main CLI entry point for Source Sync.

This module provides the command-line interface for editing connection
configurations and project associations. Every change runs through an edit
session, so each command either commits completely or not at all.
"""

import json
import logging
import sys
from typing import Dict, Tuple

import click
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from ..__version__ import __version__
from ..core import (
    ConnectionAssociations,
    ConnectionConfigurationSession,
    ConnectionSelector,
    SyncConfigurationType,
    SyncRemoteConfigurationsService,
)
from ..core.exceptions import SourceSyncError, ValidationError

console = Console()

CONFIG_TYPES = [t.value for t in SyncConfigurationType]


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def load_store(ctx) -> SyncRemoteConfigurationsService:
    return SyncRemoteConfigurationsService.from_config_dir(ctx.obj["config_dir"])


def load_selector(ctx) -> ConnectionSelector:
    return ConnectionSelector(
        load_store(ctx), ConnectionAssociations.from_config_dir(ctx.obj["config_dir"])
    )


def parse_assignments(assignments: Tuple[str, ...]) -> Dict[str, str]:
    """Turn FIELD=VALUE arguments into a mapping."""
    fields = {}
    for assignment in assignments:
        if "=" not in assignment:
            raise ValidationError(
                f"Expected FIELD=VALUE, got '{assignment}'",
                field_value=assignment,
                expected_type="FIELD=VALUE",
            )
        field_name, value = assignment.split("=", 1)
        fields[field_name.strip()] = value
    return fields


def check_name_available(session: ConnectionConfigurationSession, name: str):
    """Reject a blank name or one another configuration already uses."""
    if not name or not name.strip():
        raise ValidationError(
            "Configuration name must not be blank", field_name="name", field_value=name
        )
    if session.tree.find_leaf(name) is not None:
        raise ValidationError(
            f"A configuration named '{name}' already exists",
            field_name="name",
            field_value=name,
        )


def handle_error(ctx, error: Exception):
    """Report an error and exit with status 1."""
    if isinstance(error, SourceSyncError):
        console.print(f"[red]❌ Error: {error.message}[/red]")
        if ctx.obj["verbose"] and error.details:
            console.print(f"[red]Details: {error.details}[/red]")
    else:
        console.print(f"[red]❌ Unexpected error: {error}[/red]")
        if ctx.obj["verbose"]:
            import traceback

            console.print(traceback.format_exc())
    sys.exit(1)


def print_configuration_tree(session: ConnectionConfigurationSession):
    """Print configurations grouped by kind."""
    if session.tree.is_empty():
        console.print("[yellow]No sync configurations added[/yellow]")
        return

    tree = Tree("[bold blue]🔗 Sync Configurations[/bold blue]")
    for group in session.tree.group_nodes():
        branch = tree.add(f"[cyan]{group.label}[/cyan]")
        for leaf in session.tree.children_of(group):
            component = leaf.component
            branch.add(
                f"{component.name} [dim]{component.get_field('username')}@"
                f"{component.get_field('host')}:{component.get_field('port')}[/dim]"
            )
    console.print(tree)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option("--config-dir", type=str, help="Directory holding the data files")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, version, config_dir, verbose):
    """Source Sync - remote sync connection configurations.

    Manage SCP and SFTP connection configurations and choose which one each
    project syncs with.
    """
    if version:
        console.print(f"Source Sync version {__version__}")
        sys.exit(0)

    setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@cli.command(name="list")
@click.option("--json", "output_json", is_flag=True, help="Output in JSON format")
@click.pass_context
def list_configurations(ctx, output_json):
    """List configurations grouped by connection kind."""
    try:
        session = ConnectionConfigurationSession(load_store(ctx))
        if output_json:
            data = {
                group.label: [leaf.component.name for leaf in session.tree.children_of(group)]
                for group in session.tree.group_nodes()
            }
            click.echo(json.dumps(data, indent=2))
        else:
            print_configuration_tree(session)
        session.cancel()
    except Exception as e:
        handle_error(ctx, e)


@cli.command()
@click.argument("name")
@click.option("--json", "output_json", is_flag=True, help="Output in JSON format")
@click.pass_context
def show(ctx, name, output_json):
    """Show every field of a configuration."""
    try:
        session = ConnectionConfigurationSession(load_store(ctx))
        component = session.select(session.find(name))
        configuration = component.to_configuration()
        session.cancel()

        if output_json:
            click.echo(json.dumps(configuration.model_dump(mode="json"), indent=2))
            return

        table = Table(title=f"📂 {configuration.name}", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("type", configuration.type.pretty_name)
        for field_name, value in component.fields.items():
            if field_name == "password" and value:
                value = "********"
            table.add_row(field_name, str(value))
        console.print(table)
    except Exception as e:
        handle_error(ctx, e)


@cli.command()
@click.argument("kind", type=click.Choice(CONFIG_TYPES, case_sensitive=False))
@click.argument("name")
@click.option("--host", type=str, help="Remote host")
@click.option("--port", type=int, help="Remote port")
@click.option("--user", "username", type=str, help="Login user")
@click.option("--password", type=str, help="Login password")
@click.option("--base-path", "workspace_base_path", type=str, help="Remote base path")
@click.option("--exclude", "excluded_files", type=str, help="Semicolon separated patterns")
@click.pass_context
def add(ctx, kind, name, **options):
    """Add a configuration of KIND named NAME."""
    try:
        session = ConnectionConfigurationSession(load_store(ctx))
        check_name_available(session, name)
        config_type = SyncConfigurationType(kind.lower())
        session.add_configuration(config_type, name)
        fields = {k: v for k, v in options.items() if v is not None}
        if fields:
            session.edit(name, **fields)
        session.ok()
        console.print(f"[green]✅ Added {config_type.pretty_name} configuration '{name}'[/green]")
    except Exception as e:
        handle_error(ctx, e)


@cli.command()
@click.argument("name")
@click.argument("assignments", nargs=-1, required=True)
@click.pass_context
def edit(ctx, name, assignments):
    """Change fields of configuration NAME, given as FIELD=VALUE."""
    try:
        session = ConnectionConfigurationSession(load_store(ctx))
        fields = parse_assignments(assignments)
        new_name = fields.get("name")
        if new_name is not None and new_name != name:
            check_name_available(session, new_name)
        session.edit(name, **fields)
        session.ok()
        console.print(f"[green]✅ Updated configuration '{name}'[/green]")
    except Exception as e:
        handle_error(ctx, e)


@cli.command()
@click.argument("name")
@click.pass_context
def remove(ctx, name):
    """Remove configuration NAME."""
    try:
        session = ConnectionConfigurationSession(load_store(ctx))
        session.remove(session.find(name))
        session.ok()
        console.print(f"[green]✅ Removed configuration '{name}'[/green]")
    except Exception as e:
        handle_error(ctx, e)


@cli.command()
@click.argument("project")
@click.argument("name")
@click.pass_context
def associate(ctx, project, name):
    """Make PROJECT sync with configuration NAME."""
    try:
        load_selector(ctx).select(project, name)
        console.print(f"[green]✅ Project '{project}' now uses '{name}'[/green]")
    except Exception as e:
        handle_error(ctx, e)


@cli.command()
@click.argument("project")
@click.pass_context
def association(ctx, project):
    """Show the configuration PROJECT syncs with."""
    try:
        selector = load_selector(ctx)
        presentation = selector.presentation(project)
        if presentation.has_icon:
            console.print(presentation.text)
        else:
            console.print(f"[yellow]{presentation.text}[/yellow]")
            names = selector.choices()
            if names:
                console.print("Available configurations: " + ", ".join(names))
    except Exception as e:
        handle_error(ctx, e)


@cli.command()
@click.argument("project")
@click.pass_context
def dissociate(ctx, project):
    """Forget which configuration PROJECT syncs with."""
    try:
        load_selector(ctx).clear(project)
        console.print(f"[green]✅ Project '{project}' has no configuration[/green]")
    except Exception as e:
        handle_error(ctx, e)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Operation interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
