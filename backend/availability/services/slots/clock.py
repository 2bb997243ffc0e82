# backend/availability/services/slots/clock.py
"""
Injectable wall clock.

Advance-notice checks depend on "now"; callers receive a Clock instead of
reading the system time so tests can pin it.
"""

from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from ...config import settings

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current naive wall-clock time in the configured timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns the given moment."""
    return lambda: moment


# FastAPI dependency
def get_clock() -> Clock:
    return system_clock
