# backend/availability/routers/availability.py
"""
Public availability endpoints.

GET /availability/check          - single-slot re-check for the booking flow
GET /availability/{calendar_id}  - per-slot statuses for a date range (unauthenticated)
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import AvailabilityError, InvalidArgumentError, to_http_exception
from ..schemas.availability import AvailabilityResponse, ResolvedSlotRead, SlotCheckResponse
from ..services.slots import Clock, get_clock, resolve_single_slot, resolve_slots
from ..services.slots.config import TIME_SLOTS, parse_date
from ..services.slots.lookup import require_provider


router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/check", response_model=SlotCheckResponse)
def check_slot(
    provider_id: int | None = Query(None, alias="providerId"),
    business_id: int | None = Query(None, alias="businessId"),
    date: str | None = None,
    time_slot: str | None = Query(None, alias="timeSlot"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Re-check one slot at booking time (same rules as the public calendar)."""
    try:
        if not date or not time_slot:
            raise InvalidArgumentError("date and timeSlot are required")
        if time_slot not in TIME_SLOTS:
            raise InvalidArgumentError('timeSlot must be "morning" or "afternoon"')
        target_date = parse_date(date)
        provider = require_provider(db, provider_id, business_id)
        slot = resolve_single_slot(db, provider, target_date, time_slot, clock=clock)
    except AvailabilityError as e:
        raise to_http_exception(e)

    return SlotCheckResponse(available=slot.available)


@router.get("/{calendar_id}", response_model=AvailabilityResponse)
def get_calendar_availability(
    calendar_id: str,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """
    Slot statuses for a public calendar.

    Unknown calendars get 200 with no slots, so calendar ids cannot be probed.
    """
    try:
        start = parse_date(start_date, "startDate")
        end = parse_date(end_date, "endDate") if end_date else start
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    slots = resolve_slots(db, calendar_id, start, end, clock=clock)
    return AvailabilityResponse(slots=[ResolvedSlotRead.model_validate(s) for s in slots])
