"""Real clock implementation using datetime.now()."""

from datetime import UTC, datetime

from sitestore.integrations.time.abc import Time


class RealTime(Time):
    """Production implementation reading the system wall clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)
