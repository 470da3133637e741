"""Relational migration commands."""

import click

from sitestore.cli.ensure import Ensure
from sitestore.cli.output import machine_output, user_output
from sitestore.core.context import SiteStoreContext


@click.group("migrate")
def migrate_group() -> None:
    """Prepare stored data for a relational database."""


@migrate_group.command("schema")
@click.pass_obj
def schema_cmd(ctx: SiteStoreContext) -> None:
    """Print the database DDL."""
    machine_output(ctx.migration.generate_schema())


@migrate_group.command("validate")
@click.pass_obj
def validate_cmd(ctx: SiteStoreContext) -> None:
    """Validate stored data against the relational constraints.

    Exits with code 1 when any error is found.
    """
    report = ctx.migration.validate_migration_data()
    summary = report.summary
    user_output(
        f"Records: {summary.total_records} total, "
        f"{summary.valid_records} valid, {summary.invalid_records} invalid"
    )
    for warning in report.warnings:
        user_output(click.style("Warning: ", fg="yellow") + warning)
    for error in report.errors:
        user_output(click.style("  - ", fg="red") + error)
    Ensure.invariant(report.is_valid, f"Validation found {len(report.errors)} error(s)")
    user_output(click.style("✓", fg="green") + " Data is ready for migration")


@migrate_group.command("export")
@click.pass_obj
def export_cmd(ctx: SiteStoreContext) -> None:
    """Print schema, validation report and rows as one JSON document."""
    machine_output(ctx.migration.export_migration_data())


@migrate_group.command("plan")
@click.pass_obj
def plan_cmd(ctx: SiteStoreContext) -> None:
    """Print tables, indexes, constraints and validation rules as JSON."""
    plan = ctx.migration.generate_migration_plan()
    machine_output(plan.model_dump_json(by_alias=True, indent=2))
