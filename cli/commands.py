"""
Command-line interface for the program lister.
Uses Click framework for command parsing and execution.
"""

import functools
import json
import logging
import sys
from contextlib import ExitStack

import click
from tabulate import tabulate

from core.errors import RegistryError
from core.scope import ProgramScope, list_programs
from utils.config import get_config
from utils.exporter import Exporter
from utils.logger import get_logger

SCOPE_CHOICES = [scope.value for scope in ProgramScope]


def _load_programs(ctx, names, scope, skip_parent_keys):
    """Run the listing with defaults from configuration."""
    config = ctx.obj["config"]

    if scope is None:
        scope = config.get("filter.default_scope", ProgramScope.NONE.value)
    if skip_parent_keys is None:
        skip_parent_keys = bool(config.get("filter.skip_parent_keys", False))

    try:
        return list_programs(scope, list(names) or None, skip_parent_keys=skip_parent_keys)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _exit_on_registry_error(func):
    """
    Report registry failures as a CLI error.

    Fields are read lazily, so a failure can surface while output is being
    rendered. Records are released by the command before the exit.
    """
    @functools.wraps(func)
    def wrapper(ctx, *args, **kwargs):
        try:
            return func(ctx, *args, **kwargs)
        except RegistryError as e:
            ctx.obj["logger"].error(str(e))
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    return wrapper


def _truncate(text, width):
    if len(text) > width:
        return text[:width] + "..."
    return text


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output on the console")
@click.pass_context
def cli(ctx, verbose):
    """
    Windows Program - list programs installed on Windows.

    Reads the Uninstall entries of the current user and of the local machine
    (both 32-bit and 64-bit views).
    """
    ctx.ensure_object(dict)
    config = get_config()
    level = logging.DEBUG if verbose else getattr(logging, str(config.get("logging.level", "WARNING")).upper(), logging.WARNING)

    logger = get_logger()
    logger.set_console_level(level)

    ctx.obj["config"] = config
    ctx.obj["logger"] = logger


@cli.command(name="list")
@click.argument("names", nargs=-1)
@click.option("--scope", type=click.Choice(SCOPE_CHOICES), default=None, help="Where to look for programs")
@click.option("--format", "output_format", type=click.Choice(["table", "json", "simple"]), default=None, help="Output format")
@click.option("--skip-parent-keys/--include-parent-keys", default=None, help="Skip entries that belong to another entry")
@click.pass_context
@_exit_on_registry_error
def list_command(ctx, names, scope, output_format, skip_parent_keys):
    """
    List installed programs.

    NAMES are wildcard patterns ('*' and '?'), matched case-insensitively.
    """
    config = ctx.obj["config"]
    logger = ctx.obj["logger"]
    output_format = output_format or config.get("output.default_format", "table")

    programs = _load_programs(ctx, names, scope, skip_parent_keys)
    logger.info(f"Found {len(programs)} programs")

    with ExitStack() as stack:
        for program in programs:
            stack.enter_context(program)

        if not programs:
            click.echo("No programs found.")
            return

        if output_format == "json":
            click.echo(json.dumps([p.to_dict() for p in programs], indent=2, ensure_ascii=False))

        elif output_format == "simple":
            for prog in programs:
                click.echo(f"{prog.name} ({prog.version or 'Unknown version'})")

        else:  # table format
            width = config.get("output.max_name_width", 50)
            headers = ["Name", "Version", "Publisher", "Install Date", "Location"]
            rows = [
                [
                    _truncate(prog.name, width),
                    str(prog.version) if prog.version else "",
                    prog.publisher or "",
                    prog.install_date.strftime("%Y-%m-%d"),
                    prog.location.label if prog.location else "",
                ]
                for prog in programs
            ]
            click.echo(tabulate(rows, headers=headers, tablefmt="simple"))


@cli.command()
@click.argument("name")
@click.option("--scope", type=click.Choice(SCOPE_CHOICES), default=None, help="Where to look for programs")
@click.pass_context
@_exit_on_registry_error
def info(ctx, name, scope):
    """Show detailed information about programs matching NAME."""
    programs = _load_programs(ctx, [name], scope, None)

    with ExitStack() as stack:
        for program in programs:
            stack.enter_context(program)

        if not programs:
            click.echo(f"Program not found: {name}", err=True)
            sys.exit(1)

        for program in programs:
            rows = [
                [field.replace("_", " ").title(), "" if value is None else value]
                for field, value in program.to_dict().items()
            ]
            click.echo("\n" + "=" * 70)
            click.echo(f"Program Information: {program.name}")
            click.echo("=" * 70)
            click.echo(tabulate(rows, tablefmt="plain"))
        click.echo()


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--scope", type=click.Choice(SCOPE_CHOICES), default=None, help="Where to look for programs")
@click.option("--format", "output_format", type=click.Choice(["csv", "json"]), default="csv", help="Export format")
@click.option("--output-dir", type=click.Path(file_okay=False), default=None, help="Directory for the export file")
@click.pass_context
@_exit_on_registry_error
def export(ctx, names, scope, output_format, output_dir):
    """Export installed programs to a CSV or JSON file."""
    programs = _load_programs(ctx, names, scope, None)

    with ExitStack() as stack:
        for program in programs:
            stack.enter_context(program)

        exporter = Exporter(output_dir)
        if output_format == "json":
            path = exporter.export_programs_json(programs)
        else:
            path = exporter.export_programs_csv(programs)

    click.echo(f"Exported {len(programs)} programs to {path}")


@cli.command()
@click.option("--keep-days", default=None, type=int, help="Number of days to keep logs")
@click.pass_context
def cleanup(ctx, keep_days):
    """Clean up old log files."""
    if keep_days is None:
        keep_days = ctx.obj["config"].get("logging.keep_days", 30)

    deleted_logs = ctx.obj["logger"].cleanup_old_logs(keep_days)
    click.echo(f"Deleted {deleted_logs} old log file(s)")


if __name__ == "__main__":
    cli()
