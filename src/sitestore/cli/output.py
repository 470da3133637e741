"""Output helpers with clear intent.

user_output is for people (stderr), machine_output is for pipes (stdout).
"""

import click


def user_output(message: str = "") -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True)


def machine_output(message: str = "", nl: bool = True) -> None:
    """Write machine-readable output (JSON, SQL, CSS) to stdout."""
    click.echo(message, nl=nl)
