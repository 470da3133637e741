"""Fake Time implementation for testing.

FakeTime returns a fixed instant that only moves when the test advances it,
enabling deterministic expiry tests.
"""

from datetime import UTC, datetime, timedelta

from sitestore.integrations.time.abc import Time

DEFAULT_FAKE_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


class FakeTime(Time):
    """In-memory fake clock.

    The starting instant is provided via constructor; advance() is the only
    way to move it.
    """

    def __init__(self, now: datetime | None = None) -> None:
        """Create FakeTime.

        Args:
            now: Starting instant (defaults to 2024-01-15 12:00 UTC)
        """
        self._now = now or DEFAULT_FAKE_NOW

    def now(self) -> datetime:
        return self._now

    def advance(self, *, minutes: float = 0, seconds: float = 0) -> None:
        """Move the clock forward.

        Args:
            minutes: Minutes to add
            seconds: Seconds to add
        """
        self._now = self._now + timedelta(minutes=minutes, seconds=seconds)
