"""
Domain errors for the availability service and their HTTP mapping.

Services raise these; routers turn them into HTTPException via
to_http_exception() so route handlers stay thin.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class AvailabilityError(Exception):
    """Base class for availability domain errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidArgumentError(AvailabilityError):
    """Client error: missing or malformed input. Raised before any data access."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AvailabilityError):
    """Referenced provider or business does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


def to_http_exception(exc: AvailabilityError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))
