# backend/availability/services/slots/__init__.py
"""
Provider availability and slot-status resolution.

Read path: resolver (cache + advance notice + defaults)
Write path: overrides (block / extra precedence), rules
"""

from .config import AvailabilityConfig, get_availability_config
from .clock import Clock, get_clock, system_clock
from .cache_store import CachedStatus, PublicAvailabilityStore
from .resolver import ResolvedSlot, resolve_slots, resolve_provider_slots, resolve_single_slot
from .overrides import set_override, clear_override, get_overrides
from .invalidator import request_recompute

__all__ = [
    "AvailabilityConfig",
    "get_availability_config",
    "Clock",
    "get_clock",
    "system_clock",
    "CachedStatus",
    "PublicAvailabilityStore",
    "ResolvedSlot",
    "resolve_slots",
    "resolve_provider_slots",
    "resolve_single_slot",
    "set_override",
    "clear_override",
    "get_overrides",
    "request_recompute",
]
