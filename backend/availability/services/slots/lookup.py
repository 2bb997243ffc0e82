# backend/availability/services/slots/lookup.py
"""
Provider / business lookups used by the resolver and the mutation service.
"""

from sqlalchemy.orm import Session

from ...errors import InvalidArgumentError, NotFoundError
from ...models.generated import (
    AvailabilityRules,
    Businesses,
    Providers,
)
from .config import AvailabilityConfig, get_availability_config


def get_provider_by_calendar(db: Session, calendar_id: str) -> Providers | None:
    """Resolve a public calendar identity to its provider."""
    if not calendar_id:
        return None
    return db.query(Providers).filter(Providers.calendar_id == calendar_id).first()


def find_provider(
    db: Session,
    provider_id: int | None = None,
    business_id: int | None = None,
) -> Providers | None:
    """
    Find a provider by id, or by owning business when no id is given.

    Raises:
        InvalidArgumentError: neither reference supplied
    """
    if provider_id is not None:
        return db.get(Providers, provider_id)
    if business_id is not None:
        return (
            db.query(Providers)
            .filter(Providers.business_id == business_id)
            .order_by(Providers.id)
            .first()
        )
    raise InvalidArgumentError("Provider ID or Business ID required")


def require_provider(
    db: Session,
    provider_id: int | None = None,
    business_id: int | None = None,
) -> Providers:
    """Like find_provider(), but a missing provider is NotFoundError."""
    provider = find_provider(db, provider_id, business_id)
    if provider is None:
        raise NotFoundError("Provider not found")
    return provider


def has_availability_rules(db: Session, provider_id: int) -> bool:
    """Whether the provider has configured any weekly availability."""
    row = (
        db.query(AvailabilityRules.id)
        .filter(AvailabilityRules.provider_id == provider_id)
        .first()
    )
    return row is not None


def get_advance_notice_hours(
    db: Session,
    business_id: int | None,
    config: AvailabilityConfig | None = None,
) -> int:
    """Business advance-notice hours, falling back to the configured default."""
    config = config or get_availability_config()
    if business_id is None:
        return config.default_advance_notice_hours

    hours = (
        db.query(Businesses.min_booking_notice_hours)
        .filter(Businesses.id == business_id)
        .scalar()
    )
    if hours is None:
        return config.default_advance_notice_hours
    return max(hours, 0)
