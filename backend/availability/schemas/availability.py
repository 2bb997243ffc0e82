# backend/availability/schemas/availability.py
"""
Pydantic schemas for the public availability API.
"""

from datetime import date
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ResolvedSlotRead(BaseModel):
    """Status of one half-day slot."""
    date: date
    time_slot: str  # morning / afternoon
    status: str     # available / busy / unavailable
    available: bool

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AvailabilityResponse(BaseModel):
    slots: list[ResolvedSlotRead]


class SlotCheckResponse(BaseModel):
    available: bool
