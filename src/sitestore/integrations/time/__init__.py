from sitestore.integrations.time.abc import Time
from sitestore.integrations.time.fake import FakeTime
from sitestore.integrations.time.real import RealTime

__all__ = [
    "FakeTime",
    "RealTime",
    "Time",
]
