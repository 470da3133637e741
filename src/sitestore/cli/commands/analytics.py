"""Usage analytics command."""

import click
from rich.console import Console
from rich.table import Table

from sitestore.core.context import SiteStoreContext


def _join_or_dash(ids: list[str]) -> str:
    return ", ".join(ids) if ids else "[dim]-[/dim]"


@click.command("analytics")
@click.pass_obj
def analytics_cmd(ctx: SiteStoreContext) -> None:
    """Show project counts, most used catalog entries and storage size."""
    analytics = ctx.storage.get_usage_analytics()

    table = Table(show_header=True, header_style="bold")
    table.add_column("metric", style="cyan", no_wrap=True)
    table.add_column("value")
    table.add_row("projects", str(analytics.total_projects))
    table.add_row("sections", str(analytics.total_sections))
    table.add_row("most used theme", analytics.most_used_theme)
    table.add_row("most used icons", _join_or_dash(analytics.most_used_icons))
    table.add_row("most used sections", _join_or_dash(analytics.most_used_sections))
    table.add_row("storage (bytes)", str(analytics.storage_usage))

    # Output table to stderr (consistent with user_output convention)
    console = Console(stderr=True, width=200)
    console.print(table)
