# backend/availability/schemas/availability_rules.py

from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AvailabilityRuleWrite(BaseModel):
    weekday: Optional[int] = None  # 0 = Sunday ... 6 = Saturday

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_concurrent_jobs: Optional[int] = None
    crew_capacity: Optional[int] = None
    morning_jobs: Optional[int] = None
    afternoon_jobs: Optional[int] = None
    morning_start: Optional[str] = None
    afternoon_start: Optional[str] = None
    afternoon_end: Optional[str] = None


class AvailabilityRulesWrite(BaseModel):
    provider_id: Optional[int] = None
    business_id: Optional[int] = None
    rules: list[AvailabilityRuleWrite] = []

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AvailabilityRuleRead(BaseModel):
    id: int
    provider_id: int
    weekday: int

    start_time: str
    end_time: str
    max_concurrent_jobs: int
    crew_capacity: int
    morning_jobs: int
    afternoon_jobs: int
    morning_start: str
    afternoon_start: str
    afternoon_end: str

    model_config = {"from_attributes": True}


class AvailabilityRulesResponse(BaseModel):
    rules: list[AvailabilityRuleRead]


class AvailabilityRulesSaved(AvailabilityRulesResponse):
    success: bool = True
