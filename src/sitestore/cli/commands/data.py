"""Export, import and reset of the user's stored data."""

from pathlib import Path

import click

from sitestore.cli.ensure import Ensure
from sitestore.cli.output import machine_output, user_output
from sitestore.core.context import SiteStoreContext


@click.command("export")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the export to this file instead of stdout.",
)
@click.pass_obj
def export_cmd(ctx: SiteStoreContext, output: Path | None) -> None:
    """Export projects, settings and selection counts as JSON."""
    document = ctx.storage.export_data()
    if output is None:
        machine_output(document)
        return
    output.write_text(document + "\n", encoding="utf-8")
    user_output(f"Exported data to {output}")


@click.command("import")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def import_cmd(ctx: SiteStoreContext, file: Path) -> None:
    """Import a document previously written by `sitestore export`.

    Only the sections present in FILE are replaced.
    """
    Ensure.path_is_file(file)
    accepted = ctx.storage.import_data(file.read_text(encoding="utf-8"))
    Ensure.invariant(accepted, f"Could not import {file}; stored data was left unchanged")
    user_output(click.style("✓", fg="green") + f" Imported {file}")


@click.command("reset")
@click.option("--force", "-f", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def reset_cmd(ctx: SiteStoreContext, force: bool) -> None:
    """Delete all projects, settings, caches, custom entities and usage data."""
    if not force:
        click.confirm("This deletes all stored data. Continue?", abort=True, err=True)
    ctx.storage.clear_all_data()
    user_output(click.style("✓", fg="green") + " All stored data cleared")
