"""assembly-closure CLI."""

import json
import logging
import sys
from typing import NoReturn

import click
from pydantic import ValidationError
from rich.table import Table

from .console import console
from .console import error_console
from .errors import ClosureError
from .errors import NotAContainerError
from .logging_setup import init_logging
from .manifest import BootManifest
from .manifest import write_boot_manifest
from .metadata import PEMetadataReader
from .resolution import resolve_closure
from .settings import AppSettings
from .settings import ClosureSettings
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)


def _fail(e: BaseException) -> NoReturn:
    error_console.print(
        f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}", soft_wrap=True
    )
    sys.exit(1)


@click.group()
@click.version_option(package_name="assembly-closure")
@click.option("--log-level", default=None, help="Logging level (overrides settings)")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write JSONL logs to this file")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None):
    """Compute the assemblies needed to run a .NET entry assembly."""
    settings = AppSettings().load()
    updates = {}
    if log_level:
        updates["log_level"] = log_level
    if log_file:
        updates["log_path"] = log_file
    if updates:
        try:
            settings = ClosureSettings(**{**settings.model_dump(), **updates})
        except ValidationError as e:
            raise click.BadParameter(e.errors()[0]["msg"], param_hint="--log-level") from e

    init_logging(settings.log_level, settings.log_path)
    ctx.obj = settings


@cli.command()
@click.argument("entry", type=click.Path(dir_okay=False))
@click.option("--dependency", "-d", "dependencies", multiple=True, help="Application dependency file (repeatable)")
@click.option("--platform-dir", "-p", "platform_dirs", multiple=True, help="Platform module directory (repeatable)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text", help="Output format")
@click.option("--manifest", "manifest_path", type=click.Path(dir_okay=False), help="Also write a boot manifest here")
@click.option("--linker-enabled/--no-linker", default=False, help="Linker flag recorded in the boot manifest")
@click.pass_obj
def resolve(
    settings: ClosureSettings,
    entry: str,
    dependencies: tuple[str, ...],
    platform_dirs: tuple[str, ...],
    output_format: str,
    manifest_path: str | None,
    linker_enabled: bool,
):
    """Resolve the runtime dependency closure of ENTRY."""
    logger.debug(f"[cli:resolve] entry={entry} dependencies={len(dependencies)} platform_dirs={len(platform_dirs)}")
    try:
        result = resolve_closure(entry, dependencies, platform_dirs, settings=settings)
    except ClosureError as e:
        _fail(e)

    paths = result.paths()
    if output_format == "json":
        click.echo(json.dumps({"entry": result.entry.name, "paths": paths}, indent=2))
    else:
        for path in paths:
            click.echo(path)

    if manifest_path:
        manifest = BootManifest.build(result.entry.name, paths, linker_enabled)
        write_boot_manifest(manifest, manifest_path)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False))
def inspect(path: str):
    """Show the metadata name and references of a module file."""
    reader = PEMetadataReader()
    try:
        header = reader.read_header(path)
    except NotAContainerError as e:
        _fail(e)

    table = Table(title=f"Module: {escape_markup(header.name)}", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="green")
    table.add_column("Value")
    table.add_row("Name", escape_markup(header.name))
    table.add_row("Version", header.version)
    table.add_row("Path", escape_markup(path))

    references = reader.read_references(path)
    table.add_row("References", escape_markup(", ".join(references)) if references else "[dim]none[/dim]")
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
