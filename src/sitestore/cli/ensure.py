"""CLI error handling utilities with styled output.

Every failure is reported with a red "Error:" prefix on stderr and exit code 1.
"""

from pathlib import Path
from typing import TypeVar

import click

from sitestore.cli.output import user_output

T = TypeVar("T")


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def not_none(value: T | None, error_message: str) -> T:
        """Ensure value is not None, narrowing its type.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)
        return value

    @staticmethod
    def path_is_file(path: Path, error_message: str | None = None) -> None:
        """Ensure path exists and is a regular file."""
        Ensure.invariant(path.is_file(), error_message or f"File not found: {path}")
