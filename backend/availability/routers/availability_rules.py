# backend/availability/routers/availability_rules.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import AvailabilityError, to_http_exception
from ..schemas.availability_rules import (
    AvailabilityRuleRead,
    AvailabilityRulesResponse,
    AvailabilityRulesSaved,
    AvailabilityRulesWrite,
)
from ..services.slots.lookup import require_provider
from ..services.slots.rules import list_rules, replace_rules

router = APIRouter(prefix="/availability/rules", tags=["availability_rules"])


@router.get("", response_model=AvailabilityRulesResponse)
def get_rules(
    provider_id: int | None = Query(None, alias="providerId"),
    business_id: int | None = Query(None, alias="businessId"),
    db: Session = Depends(get_db),
):
    try:
        provider = require_provider(db, provider_id, business_id)
    except AvailabilityError as e:
        raise to_http_exception(e)
    return AvailabilityRulesResponse(
        rules=[AvailabilityRuleRead.model_validate(r) for r in list_rules(db, provider)]
    )


@router.post("", response_model=AvailabilityRulesSaved)
def save_rules(
    data: AvailabilityRulesWrite,
    db: Session = Depends(get_db),
):
    """Replace the provider's weekly rules."""
    try:
        provider = require_provider(db, data.provider_id, data.business_id)
        rows = replace_rules(
            db, provider, [rule.model_dump(exclude_none=True) for rule in data.rules]
        )
    except AvailabilityError as e:
        raise to_http_exception(e)
    return AvailabilityRulesSaved(rules=[AvailabilityRuleRead.model_validate(r) for r in rows])
