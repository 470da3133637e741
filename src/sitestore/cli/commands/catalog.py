"""Catalog browsing commands for icons, sections and themes."""

from collections.abc import Sequence
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from sitestore.cli.ensure import Ensure
from sitestore.cli.output import machine_output, user_output
from sitestore.core.catalog.registry import DEFAULT_POPULAR_LIMIT, Registry
from sitestore.core.catalog.types import CatalogEntity
from sitestore.core.context import SiteStoreContext

KIND_CHOICE = click.Choice(["icons", "sections", "themes"])


def _registry_for(ctx: SiteStoreContext, kind: str) -> Registry[Any]:
    if kind == "icons":
        return ctx.storage.icons
    if kind == "sections":
        return ctx.storage.sections
    return ctx.storage.themes


def _render_entities(entities: Sequence[CatalogEntity]) -> None:
    if not entities:
        user_output("No matching entries")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("name", no_wrap=True)
    table.add_column("category", no_wrap=True)
    table.add_column("usage", justify="right")
    table.add_column("source", no_wrap=True)
    for entity in entities:
        source = "built-in" if entity.is_built_in else "[yellow]custom[/yellow]"
        table.add_row(entity.id, entity.name, entity.category, str(entity.usage), source)

    # Output table to stderr (consistent with user_output convention)
    console = Console(stderr=True, width=200)
    console.print(table)


@click.group("catalog")
def catalog_group() -> None:
    """Browse the icon, section and theme catalogs."""


@catalog_group.command("list")
@click.argument("kind", type=KIND_CHOICE)
@click.option("--category", "-c", help="Only show entries in this category.")
@click.pass_obj
def list_cmd(ctx: SiteStoreContext, kind: str, category: str | None) -> None:
    """List catalog entries of KIND."""
    registry = _registry_for(ctx, kind)
    if category is None:
        _render_entities(registry.get_all())
    else:
        _render_entities(registry.get_by_category(category))


@catalog_group.command("search")
@click.argument("kind", type=KIND_CHOICE)
@click.argument("query")
@click.option("--category", "-c", help="Only search this category.")
@click.pass_obj
def search_cmd(ctx: SiteStoreContext, kind: str, query: str, category: str | None) -> None:
    """Search catalog entries of KIND by name and keywords."""
    _render_entities(_registry_for(ctx, kind).search(query, category))


@catalog_group.command("popular")
@click.argument("kind", type=KIND_CHOICE)
@click.option(
    "--limit", "-n", type=click.IntRange(min=1), default=DEFAULT_POPULAR_LIMIT, show_default=True
)
@click.pass_obj
def popular_cmd(ctx: SiteStoreContext, kind: str, limit: int) -> None:
    """Show the most used catalog entries of KIND."""
    _render_entities(_registry_for(ctx, kind).get_popular(limit))


@catalog_group.command("css")
@click.argument("theme_id")
@click.pass_obj
def css_cmd(ctx: SiteStoreContext, theme_id: str) -> None:
    """Print THEME_ID as CSS custom properties."""
    theme = Ensure.not_none(ctx.storage.themes.get(theme_id), f"Theme not found: {theme_id}")
    machine_output(ctx.storage.themes.generate_css(theme.id), nl=False)
