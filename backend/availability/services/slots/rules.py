# backend/availability/services/slots/rules.py
"""
Weekly availability rules.

The resolver only asks whether a provider has any rule at all; the full
rule set is consumed by the cache-recomputation job.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import InvalidArgumentError
from ...models.generated import AvailabilityRules, Providers
from .config import normalize_time
from .invalidator import request_recompute

logger = logging.getLogger(__name__)

RULE_DEFAULTS = {
    "start_time": "08:00:00",
    "end_time": "17:00:00",
    "max_concurrent_jobs": 1,
    "crew_capacity": 2,
    "morning_jobs": 0,
    "afternoon_jobs": 0,
    "morning_start": "08:00:00",
    "afternoon_start": "12:00:00",
    "afternoon_end": "17:00:00",
}

_TIME_FIELDS = ("start_time", "end_time", "morning_start", "afternoon_start", "afternoon_end")


def list_rules(db: Session, provider: Providers) -> list[AvailabilityRules]:
    return (
        db.query(AvailabilityRules)
        .filter(AvailabilityRules.provider_id == provider.id)
        .order_by(AvailabilityRules.weekday, AvailabilityRules.id)
        .all()
    )


def replace_rules(
    db: Session,
    provider: Providers,
    rules: list[dict],
) -> list[AvailabilityRules]:
    """
    Replace the provider's whole weekly rule set.

    Missing / falsy fields take RULE_DEFAULTS. Weekday is 0 = Sunday ... 6 = Saturday.
    """
    prepared = [_prepare_rule(rule) for rule in rules]

    try:
        db.query(AvailabilityRules).filter(
            AvailabilityRules.provider_id == provider.id
        ).delete(synchronize_session=False)

        rows = [AvailabilityRules(provider_id=provider.id, **values) for values in prepared]
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to replace availability rules for provider {provider.id}")
        raise

    logger.info(f"Saved {len(rows)} availability rule(s) for provider {provider.id}")
    request_recompute(provider)
    return list_rules(db, provider)


def _prepare_rule(rule: dict) -> dict:
    weekday = rule.get("weekday")
    if not isinstance(weekday, int) or isinstance(weekday, bool) or not 0 <= weekday <= 6:
        raise InvalidArgumentError("weekday must be an integer between 0 and 6")

    values = {"weekday": weekday}
    for field, default in RULE_DEFAULTS.items():
        values[field] = rule.get(field) or default

    for field in _TIME_FIELDS:
        values[field] = normalize_time(values[field], field)
    return values
