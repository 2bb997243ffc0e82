# backend/availability/services/slots/cache_store.py
"""
Public Availability Cache access.

Table: public_availability (calendar_id, date, morning_status, afternoon_status)
One row per calendar per date, written by the recomputation job.

Lookups are three-valued per slot: a missing row or a missing / unknown
status is NO_ENTRY, which is never the same thing as AVAILABLE.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from sqlalchemy.orm import Session

from ...models.generated import PublicAvailability
from .config import AVAILABLE, BUSY, MORNING, UNAVAILABLE


class CachedStatus(str, Enum):
    NO_ENTRY = "no_entry"
    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"

    @classmethod
    def from_raw(cls, raw: str | None) -> "CachedStatus":
        if raw in (AVAILABLE, BUSY, UNAVAILABLE):
            return cls(raw)
        return cls.NO_ENTRY


@dataclass(frozen=True)
class CacheEntry:
    """Cached statuses for one calendar date."""
    date: date
    morning: CachedStatus
    afternoon: CachedStatus

    def status_for(self, time_slot: str) -> CachedStatus:
        return self.morning if time_slot == MORNING else self.afternoon

    @property
    def has_block(self) -> bool:
        return CachedStatus.UNAVAILABLE in (self.morning, self.afternoon)


class PublicAvailabilityStore:
    """SQL-backed wrapper around the public availability projection."""

    def __init__(self, db: Session):
        self.db = db

    # ── Read ─────────────────────────────────────────────────────────────

    def get_range(
        self,
        calendar_id: str,
        start_date: date,
        end_date: date,
    ) -> dict[date, CacheEntry]:
        """
        Get cached entries for [start_date, end_date].

        Returns:
            Dict mapping date → CacheEntry. Dates without a row are absent.
        """
        rows = (
            self.db.query(PublicAvailability)
            .filter(
                PublicAvailability.calendar_id == calendar_id,
                PublicAvailability.date >= start_date.isoformat(),
                PublicAvailability.date <= end_date.isoformat(),
            )
            .order_by(PublicAvailability.date)
            .all()
        )

        entries = {}
        for row in rows:
            entry = _row_to_entry(row)
            if entry is not None:
                entries[entry.date] = entry
        return entries

    def lookup(self, calendar_id: str, dt: date, time_slot: str) -> CachedStatus:
        """Three-valued status of a single slot."""
        entry = self.get_range(calendar_id, dt, dt).get(dt)
        if entry is None:
            return CachedStatus.NO_ENTRY
        return entry.status_for(time_slot)

    # ── Write ────────────────────────────────────────────────────────────

    def upsert_entries(
        self,
        calendar_id: str,
        entries: list[tuple[date, str | None, str | None]],
    ) -> int:
        """
        Insert or replace cached rows.

        Args:
            calendar_id: Public calendar identity
            entries: (date, morning_status, afternoon_status) triples

        Returns:
            Number of rows written. Caller commits.
        """
        if not entries:
            return 0

        date_strs = [dt.isoformat() for dt, _, _ in entries]
        existing = {
            row.date: row
            for row in self.db.query(PublicAvailability).filter(
                PublicAvailability.calendar_id == calendar_id,
                PublicAvailability.date.in_(date_strs),
            )
        }

        for dt, morning_status, afternoon_status in entries:
            row = existing.get(dt.isoformat())
            if row is None:
                row = PublicAvailability(calendar_id=calendar_id, date=dt.isoformat())
                self.db.add(row)
                existing[row.date] = row
            row.morning_status = morning_status
            row.afternoon_status = afternoon_status

        self.db.flush()
        return len(entries)


def _row_to_entry(row: PublicAvailability) -> CacheEntry | None:
    try:
        dt = date.fromisoformat(row.date)
    except (TypeError, ValueError):
        return None
    return CacheEntry(
        date=dt,
        morning=CachedStatus.from_raw(row.morning_status),
        afternoon=CachedStatus.from_raw(row.afternoon_status),
    )
