# backend/availability/services/slots/invalidator.py
"""
Recompute requests for the Public Availability Cache.

Cache rows are never deleted here: dropping a row that says "unavailable"
would let the resolver fall back to its permissive default until the job
catches up. Instead, affected keys are queued for the recomputation job.

Triggers:
✓ Override written or cleared → that provider/date
✓ Weekly rules replaced → every date of that provider

Does NOT trigger:
✗ Reads (the resolver never writes)
"""

from datetime import date

from ...models.generated import Providers
from ..events import emit_event

RECOMPUTE_EVENT = "availability.recompute"


def request_recompute(
    provider: Providers,
    dates: list[date] | None = None,
) -> bool:
    """
    Ask the recomputation job to refresh cached rows.

    Args:
        provider: Provider whose calendar changed
        dates: Specific dates, or None for every date

    Returns:
        True when the request was queued
    """
    return emit_event(
        RECOMPUTE_EVENT,
        {
            "provider_id": provider.id,
            "calendar_id": provider.calendar_id,
            "dates": [d.isoformat() for d in dates] if dates is not None else None,
        },
    )
