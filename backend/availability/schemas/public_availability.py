# backend/availability/schemas/public_availability.py

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CachedSlotStatus = Literal["available", "busy", "unavailable"]


class PublicAvailabilityEntryWrite(BaseModel):
    date: date
    morning_status: Optional[CachedSlotStatus] = None
    afternoon_status: Optional[CachedSlotStatus] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PublicAvailabilityWrite(BaseModel):
    calendar_id: str
    entries: list[PublicAvailabilityEntryWrite]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PublicAvailabilityWritten(BaseModel):
    calendar_id: str
    written: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
