# backend/availability/services/slots/resolver.py
"""
Slot-status resolution.

Produces one status per (date, half-day slot) for a provider by merging:
- the Public Availability Cache (source of truth whenever it has a status)
- the "no rules configured yet" default (available)
- the business advance-notice policy, evaluated against the injected clock

Precedence, most restrictive wins:
1. too soon under advance notice → unavailable, always
2. cached status, when present (a cached unavailable is never resurrected)
3. default → available
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from ...models.generated import Providers
from .cache_store import CachedStatus, CacheEntry, PublicAvailabilityStore
from .clock import Clock, system_clock
from .config import (
    AVAILABLE,
    TIME_SLOTS,
    UNAVAILABLE,
    AvailabilityConfig,
    get_availability_config,
)
from .lookup import get_advance_notice_hours, get_provider_by_calendar, has_availability_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedSlot:
    date: date
    time_slot: str
    status: str

    @property
    def available(self) -> bool:
        return self.status == AVAILABLE


def resolve_slots(
    db: Session,
    calendar_id: str,
    start_date: date,
    end_date: date | None = None,
    *,
    clock: Clock | None = None,
    config: AvailabilityConfig | None = None,
) -> list[ResolvedSlot]:
    """
    Resolve slot statuses for a public calendar.

    An unknown calendar resolves to an empty list, never an error.
    """
    provider = get_provider_by_calendar(db, calendar_id)
    if provider is None:
        logger.info(f"Unknown calendar {calendar_id!r} - returning no slots")
        return []

    return resolve_provider_slots(
        db, provider, start_date, end_date, clock=clock, config=config
    )


def resolve_provider_slots(
    db: Session,
    provider: Providers,
    start_date: date,
    end_date: date | None = None,
    *,
    clock: Clock | None = None,
    config: AvailabilityConfig | None = None,
) -> list[ResolvedSlot]:
    """
    Resolve slot statuses for [start_date, end_date] (inclusive).

    The range is cut at config.max_range_days; slots computed up to the cut
    are returned.
    """
    config = config or get_availability_config()
    now = (clock or system_clock)()
    if end_date is None:
        end_date = start_date
    if end_date < start_date:
        return []

    has_rules = has_availability_rules(db, provider.id)
    if not has_rules:
        logger.info(
            f"No availability rules for provider {provider.id} - defaulting uncached dates to available"
        )

    notice_hours = get_advance_notice_hours(db, provider.business_id, config)
    min_bookable = now + timedelta(hours=notice_hours)

    # Never read more cache rows than the loop can consume
    span = min((end_date - start_date).days, config.max_range_days - 1)
    last_date = start_date + timedelta(days=span)
    store = PublicAvailabilityStore(db)
    cached = store.get_range(provider.calendar_id, start_date, last_date)

    blocked = [entry.date.isoformat() for entry in cached.values() if entry.has_block]
    if blocked:
        logger.debug(f"Calendar {provider.calendar_id} has blocked dates: {', '.join(blocked)}")

    slots: list[ResolvedSlot] = []
    current = start_date
    iterations = 0

    while current <= end_date:
        if iterations >= config.max_range_days:
            logger.error(
                f"Iteration ceiling ({config.max_range_days} days) hit for provider {provider.id}, "
                f"range {start_date}..{end_date}; returning {len(slots)} slots"
            )
            break

        entry = cached.get(current)
        for time_slot in TIME_SLOTS:
            status = _cached_or_default(entry, time_slot)
            if is_too_soon(current, time_slot, now, min_bookable, config):
                status = UNAVAILABLE
            slots.append(ResolvedSlot(date=current, time_slot=time_slot, status=status))

        if current == date.max:
            break
        current += timedelta(days=1)
        iterations += 1

    return slots


def resolve_single_slot(
    db: Session,
    provider: Providers,
    target_date: date,
    time_slot: str,
    *,
    clock: Clock | None = None,
    config: AvailabilityConfig | None = None,
) -> ResolvedSlot:
    """Resolve one slot, e.g. for re-checking at booking time."""
    slots = resolve_provider_slots(
        db, provider, target_date, target_date, clock=clock, config=config
    )
    return next(s for s in slots if s.time_slot == time_slot)


def is_too_soon(
    target_date: date,
    time_slot: str,
    now: datetime,
    min_bookable: datetime,
    config: AvailabilityConfig,
) -> bool:
    """
    Advance-notice check.

    Today: the slot's nominal start (08:00 / 12:00) must not precede min_bookable.
    Other dates: anything before min_bookable's calendar date is too soon.
    """
    if target_date == now.date():
        return config.slot_anchor(target_date, time_slot) < min_bookable
    return target_date < min_bookable.date()


def _cached_or_default(
    entry: CacheEntry | None,
    time_slot: str,
) -> str:
    cached = entry.status_for(time_slot) if entry is not None else CachedStatus.NO_ENTRY
    if cached is not CachedStatus.NO_ENTRY:
        return cached.value

    # No cache row: the provider is open by default whether or not rules exist;
    # the recomputation job materializes rule-driven restrictions into the cache.
    return AVAILABLE
