import logging
import os

import click

from sitestore.cli.commands.analytics import analytics_cmd
from sitestore.cli.commands.cache import cache_group
from sitestore.cli.commands.catalog import catalog_group
from sitestore.cli.commands.data import export_cmd, import_cmd, reset_cmd
from sitestore.cli.commands.migrate import migrate_group
from sitestore.cli.output import user_output
from sitestore.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="sitestore")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Inspect and maintain a website builder's stored projects and catalogs."""
    if debug or os.environ.get("SITESTORE_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ValueError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from e


cli.add_command(analytics_cmd)
cli.add_command(cache_group)
cli.add_command(catalog_group)
cli.add_command(export_cmd)
cli.add_command(import_cmd)
cli.add_command(migrate_group)
cli.add_command(reset_cmd)


def main() -> None:
    """CLI entry point used by the `sitestore` console script."""
    cli()
