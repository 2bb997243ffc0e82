# backend/availability/services/slots/config.py
"""
Availability engine configuration and shared vocabulary.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from functools import lru_cache

from ...config import settings
from ...errors import InvalidArgumentError


# Time slots
MORNING = "morning"
AFTERNOON = "afternoon"
FULL_DAY = "full_day"

TIME_SLOTS = (MORNING, AFTERNOON)
OVERRIDE_SCOPES = (MORNING, AFTERNOON, FULL_DAY)

# Slot statuses
AVAILABLE = "available"
BUSY = "busy"
UNAVAILABLE = "unavailable"

SLOT_STATUSES = (AVAILABLE, BUSY, UNAVAILABLE)

# Override kinds
BLOCK = "block"
EXTRA = "extra"

OVERRIDE_KINDS = (BLOCK, EXTRA)


@dataclass(frozen=True)
class AvailabilityConfig:
    """
    Configuration for slot-status resolution.

    Attributes:
        default_advance_notice_hours: Used when a business has no notice configured
        max_range_days: Hard ceiling on days iterated per request
        morning_anchor: Nominal start of the morning slot (same-day cutoff)
        afternoon_anchor: Nominal start of the afternoon slot (same-day cutoff)
    """
    default_advance_notice_hours: int = 24
    max_range_days: int = 1000
    morning_anchor: time = time(8, 0)
    afternoon_anchor: time = time(12, 0)

    def __post_init__(self):
        if self.default_advance_notice_hours < 0:
            raise ValueError(
                f"default_advance_notice_hours must be >= 0, got {self.default_advance_notice_hours}"
            )
        if self.max_range_days < 1:
            raise ValueError(f"max_range_days must be >= 1, got {self.max_range_days}")

    def slot_anchor(self, target_date: date, time_slot: str) -> datetime:
        """Datetime at which a slot nominally starts on target_date."""
        anchor = self.morning_anchor if time_slot == MORNING else self.afternoon_anchor
        return datetime.combine(target_date, anchor)


@lru_cache
def get_availability_config() -> AvailabilityConfig:
    """Get availability configuration (singleton, built from settings)."""
    return AvailabilityConfig(
        default_advance_notice_hours=settings.default_advance_notice_hours,
        max_range_days=settings.max_range_days,
    )


# ── Parsing helpers ─────────────────────────────────────────────────────


def parse_date(value: str | None, field: str = "date") -> date:
    """Parse a YYYY-MM-DD string, raising InvalidArgumentError on bad input."""
    if not value:
        raise InvalidArgumentError(f"{field} is required")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidArgumentError(f"{field} must be in YYYY-MM-DD format")


def normalize_time(value: str | None, field: str) -> str | None:
    """Normalize "HH:MM" / "HH:MM:SS" to "HH:MM:SS"; None passes through."""
    if not value:
        return None
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value, fmt).strftime("%H:%M:%S")
        except ValueError:
            continue
    raise InvalidArgumentError(f"{field} must be in HH:MM format")
