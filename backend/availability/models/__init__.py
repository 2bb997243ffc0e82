from .generated import (
    Base,
    Businesses,
    Providers,
    AvailabilityRules,
    AvailabilityOverrides,
    PublicAvailability,
)

__all__ = [
    "Base",
    "Businesses",
    "Providers",
    "AvailabilityRules",
    "AvailabilityOverrides",
    "PublicAvailability",
]
