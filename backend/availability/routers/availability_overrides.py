# backend/availability/routers/availability_overrides.py
# Provider-owned writes; authentication is handled upstream.

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import AvailabilityError, to_http_exception
from ..schemas.availability_overrides import (
    AvailabilityOverrideRead,
    AvailabilityOverrideSaved,
    AvailabilityOverridesForDate,
    AvailabilityOverrideWrite,
    SuccessResponse,
)
from ..services.slots.overrides import clear_override, get_overrides, set_override

router = APIRouter(prefix="/availability/overrides", tags=["availability_overrides"])


@router.get("", response_model=AvailabilityOverridesForDate)
def list_overrides_for_date(
    provider_id: int | None = Query(None, alias="providerId"),
    business_id: int | None = Query(None, alias="businessId"),
    date: str | None = None,
    db: Session = Depends(get_db),
):
    try:
        override, rows = get_overrides(
            db, date=date, provider_id=provider_id, business_id=business_id
        )
    except AvailabilityError as e:
        raise to_http_exception(e)
    return AvailabilityOverridesForDate(
        override=AvailabilityOverrideRead.model_validate(override) if override else None,
        all_overrides=[AvailabilityOverrideRead.model_validate(r) for r in rows],
    )


@router.post("", response_model=AvailabilityOverrideSaved)
def save_override(
    data: AvailabilityOverrideWrite,
    db: Session = Depends(get_db),
):
    try:
        obj = set_override(db, **data.model_dump())
    except AvailabilityError as e:
        raise to_http_exception(e)
    return AvailabilityOverrideSaved(override=AvailabilityOverrideRead.model_validate(obj))


@router.delete("", response_model=SuccessResponse)
def delete_override(
    provider_id: int | None = Query(None, alias="providerId"),
    business_id: int | None = Query(None, alias="businessId"),
    date: str | None = None,
    time_slot: str | None = Query(None, alias="timeSlot"),
    kind: str = "block",
    db: Session = Depends(get_db),
):
    try:
        clear_override(
            db,
            date=date,
            provider_id=provider_id,
            business_id=business_id,
            time_slot=time_slot,
            kind=kind,
        )
    except AvailabilityError as e:
        raise to_http_exception(e)
    return SuccessResponse()
