# backend/availability/routers/internal.py
"""
Internal API endpoints for trusted consumers.

Called directly by the cache-recomputation job to publish freshly computed
public availability rows. Not exposed to public callers.

Access: hosts listed in settings.internal_allowed_hosts
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..schemas.public_availability import PublicAvailabilityWrite, PublicAvailabilityWritten
from ..services.slots import PublicAvailabilityStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", tags=["internal"])


@router.post("/public-availability", response_model=PublicAvailabilityWritten)
def write_public_availability(
    data: PublicAvailabilityWrite,
    request: Request,
    db: Session = Depends(get_db),
):
    """Upsert cached morning/afternoon statuses for a calendar."""
    client_host = request.client.host if request.client else None
    if client_host not in settings.internal_allowed_hosts:
        logger.warning(f"Internal endpoint called from disallowed host: {client_host}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Internal endpoints are only accessible from trusted hosts"
        )

    store = PublicAvailabilityStore(db)
    try:
        written = store.upsert_entries(
            data.calendar_id,
            [(e.date, e.morning_status, e.afternoon_status) for e in data.entries],
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to write public availability for calendar {data.calendar_id}")
        raise

    logger.info(f"Wrote {written} public availability row(s) for calendar {data.calendar_id}")
    return PublicAvailabilityWritten(calendar_id=data.calendar_id, written=written)
