# backend/availability/schemas/availability_overrides.py

from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AvailabilityOverrideWrite(BaseModel):
    # Validated by the mutation service so bad input is a 400, not a 422
    provider_id: Optional[int] = None
    business_id: Optional[int] = None

    date: Optional[str] = None
    kind: Optional[str] = None
    time_slot: Optional[str] = None

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_concurrent_jobs: Optional[int] = None
    note: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AvailabilityOverrideRead(BaseModel):
    id: int
    provider_id: int

    date: str
    kind: str
    time_slot: Optional[str] = None

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_concurrent_jobs: Optional[int] = None
    note: Optional[str] = None

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = {"from_attributes": True}


class AvailabilityOverrideSaved(BaseModel):
    success: bool = True
    override: AvailabilityOverrideRead


class AvailabilityOverridesForDate(BaseModel):
    override: Optional[AvailabilityOverrideRead] = None
    all_overrides: list[AvailabilityOverrideRead] = []

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(BaseModel):
    success: bool = True
