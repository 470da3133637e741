"""Cache maintenance commands."""

import click

from sitestore.cli.output import user_output
from sitestore.core.context import SiteStoreContext


@click.group("cache")
def cache_group() -> None:
    """Manage the TTL cache."""


@cache_group.command("clear")
@click.pass_obj
def clear_cmd(ctx: SiteStoreContext) -> None:
    """Remove every cache entry, expired or not."""
    count = len(ctx.storage.cache_keys())
    ctx.storage.clear_cache()
    user_output(f"Cleared {count} cache entr{'y' if count == 1 else 'ies'}")
