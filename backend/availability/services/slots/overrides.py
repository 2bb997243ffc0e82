# backend/availability/services/slots/overrides.py
"""
Override mutation service.

Keeps a provider's block / extra-window overrides self-consistent:

- full-day block  → replaces every block on that date
- slot block      → replaces a full-day block on that date (narrowing),
                    otherwise only the previous block for the same slot
- extra window    → one whole-day row per date, updated in place

Every mutation is one transaction per (provider, date). Legacy rows with a
NULL time_slot are read as full-day blocks.
"""

import hashlib
import logging
from datetime import date, datetime, timezone

from sqlalchemy import or_, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import InvalidArgumentError
from ...models.generated import AvailabilityOverrides
from .config import (
    BLOCK,
    EXTRA,
    FULL_DAY,
    OVERRIDE_KINDS,
    OVERRIDE_SCOPES,
    normalize_time,
    parse_date,
)
from .invalidator import request_recompute
from .lookup import find_provider, require_provider

logger = logging.getLogger(__name__)


def set_override(
    db: Session,
    *,
    date: str | None,
    kind: str | None,
    provider_id: int | None = None,
    business_id: int | None = None,
    time_slot: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
    max_concurrent_jobs: int | None = None,
    note: str | None = None,
) -> AvailabilityOverrides:
    """
    Create or update an override.

    Returns:
        The persisted override row.

    Raises:
        InvalidArgumentError: bad date / kind / time_slot / times
        NotFoundError: unknown provider or business
        SQLAlchemyError: store failure (transaction rolled back)
    """
    # Validate before touching the store
    target_date = parse_date(date)
    if not kind:
        raise InvalidArgumentError("kind is required")
    if kind not in OVERRIDE_KINDS:
        raise InvalidArgumentError('kind must be "block" or "extra"')
    scope = _validate_scope(time_slot)

    if kind == EXTRA:
        start_time = normalize_time(start_time, "startTime")
        end_time = normalize_time(end_time, "endTime")
        if start_time and end_time and end_time <= start_time:
            raise InvalidArgumentError("endTime must be after startTime")
        # 0 means "no limit set", same as omitting it
        max_concurrent_jobs = max_concurrent_jobs or None
        if max_concurrent_jobs is not None and max_concurrent_jobs < 1:
            raise InvalidArgumentError("maxConcurrentJobs must be at least 1")

    provider = require_provider(db, provider_id, business_id)
    note = note or None

    try:
        _lock_override_key(db, provider.id, target_date)
        if kind == BLOCK:
            row = _write_block(db, provider.id, target_date, scope or FULL_DAY, note)
        else:
            row = _write_extra(
                db, provider.id, target_date, start_time, end_time, max_concurrent_jobs, note
            )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            f"Failed to save {kind} override for provider {provider.id} on {target_date}"
        )
        raise

    db.refresh(row)
    request_recompute(provider, [target_date])
    return row


def clear_override(
    db: Session,
    *,
    date: str | None,
    provider_id: int | None = None,
    business_id: int | None = None,
    time_slot: str | None = None,
    kind: str = BLOCK,
) -> int:
    """
    Remove overrides for a date.

    Blocks: with time_slot only that slot's block goes ("full_day" also
    removes legacy NULL-scoped rows); without it every block on the date goes.
    Extras: the date's extra window goes; time_slot is ignored.

    Returns:
        Number of rows deleted.
    """
    target_date = parse_date(date)
    if kind not in OVERRIDE_KINDS:
        raise InvalidArgumentError('kind must be "block" or "extra"')
    scope = _validate_scope(time_slot)

    provider = require_provider(db, provider_id, business_id)

    try:
        _lock_override_key(db, provider.id, target_date)
        query = _overrides_on(db, provider.id, target_date).filter(
            AvailabilityOverrides.kind == kind
        )
        if kind == BLOCK and scope is not None:
            query = query.filter(_scope_matches(scope))

        rows = query.all()
        for row in rows:
            db.delete(row)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            f"Failed to clear {kind} override for provider {provider.id} on {target_date}"
        )
        raise

    logger.info(
        f"Cleared {len(rows)} {kind} override(s) for provider {provider.id} "
        f"on {target_date} (slot={scope or 'all'})"
    )
    if rows:
        request_recompute(provider, [target_date])
    return len(rows)


def get_overrides(
    db: Session,
    *,
    date: str | None,
    provider_id: int | None = None,
    business_id: int | None = None,
) -> tuple[AvailabilityOverrides | None, list[AvailabilityOverrides]]:
    """
    Overrides on a date plus the most restrictive one.

    An unknown provider yields (None, []).
    """
    target_date = parse_date(date)
    provider = find_provider(db, provider_id, business_id)
    if provider is None:
        return None, []

    rows = (
        _overrides_on(db, provider.id, target_date)
        .order_by(AvailabilityOverrides.id)
        .all()
    )
    return pick_effective_override(rows), rows


def pick_effective_override(
    rows: list[AvailabilityOverrides],
) -> AvailabilityOverrides | None:
    """Full-day block, then any slot block, then whatever comes first."""
    if not rows:
        return None
    blocks = [r for r in rows if r.kind == BLOCK]
    for row in blocks:
        if is_full_day(row.time_slot):
            return row
    if blocks:
        return blocks[0]
    return rows[0]


def migrate_legacy_full_day_blocks(db: Session) -> int:
    """
    Rewrite NULL-scoped blocks to the canonical "full_day" scope.

    Where a canonical row already exists for the same provider/date the
    legacy row is dropped instead.

    Returns:
        Number of legacy rows migrated or dropped.
    """
    legacy = (
        db.query(AvailabilityOverrides)
        .filter(
            AvailabilityOverrides.kind == BLOCK,
            AvailabilityOverrides.time_slot.is_(None),
        )
        .all()
    )

    migrated: set[tuple[int, str]] = set()
    for row in legacy:
        key = (row.provider_id, row.date)
        if key in migrated:
            db.delete(row)
            continue

        canonical = (
            db.query(AvailabilityOverrides.id)
            .filter(
                AvailabilityOverrides.provider_id == row.provider_id,
                AvailabilityOverrides.date == row.date,
                AvailabilityOverrides.kind == BLOCK,
                AvailabilityOverrides.time_slot == FULL_DAY,
            )
            .first()
        )
        if canonical is not None:
            db.delete(row)
        else:
            row.time_slot = FULL_DAY
            row.updated_at = _timestamp()
            migrated.add(key)

    db.commit()
    if legacy:
        logger.info(f"Migrated {len(legacy)} legacy full-day block(s)")
    return len(legacy)


def is_full_day(time_slot: str | None) -> bool:
    return time_slot is None or time_slot == FULL_DAY


# ── Writers ─────────────────────────────────────────────────────────────


def _write_block(
    db: Session,
    provider_id: int,
    target_date: date,
    scope: str,
    note: str | None,
) -> AvailabilityOverrides:
    blocks = (
        _overrides_on(db, provider_id, target_date)
        .filter(AvailabilityOverrides.kind == BLOCK)
        .all()
    )

    keep = next((b for b in blocks if b.time_slot == scope), None)
    if scope == FULL_DAY:
        # Full day subsumes every partial block
        stale = [b for b in blocks if b is not keep]
    else:
        stale = [b for b in blocks if is_full_day(b.time_slot)]
        if stale:
            logger.info(
                f"Narrowing full-day block to {scope} for provider {provider_id} on {target_date}"
            )

    for row in stale:
        db.delete(row)
    # Deletes must reach the store before the insert (unique key)
    db.flush()

    if keep is None:
        keep = AvailabilityOverrides(
            provider_id=provider_id,
            date=target_date.isoformat(),
            kind=BLOCK,
            time_slot=scope,
        )
        db.add(keep)

    keep.start_time = None
    keep.end_time = None
    keep.max_concurrent_jobs = None
    keep.note = note
    keep.updated_at = _timestamp()
    db.flush()

    logger.info(
        f"Blocked {scope} for provider {provider_id} on {target_date} "
        f"(replaced {len(stale)} block(s))"
    )
    return keep


def _write_extra(
    db: Session,
    provider_id: int,
    target_date: date,
    start_time: str | None,
    end_time: str | None,
    max_concurrent_jobs: int | None,
    note: str | None,
) -> AvailabilityOverrides:
    row = (
        _overrides_on(db, provider_id, target_date)
        .filter(
            AvailabilityOverrides.kind == EXTRA,
            AvailabilityOverrides.time_slot.is_(None),
        )
        .first()
    )
    if row is None:
        row = AvailabilityOverrides(
            provider_id=provider_id,
            date=target_date.isoformat(),
            kind=EXTRA,
            time_slot=None,
        )
        db.add(row)

    row.start_time = start_time
    row.end_time = end_time
    row.max_concurrent_jobs = max_concurrent_jobs
    row.note = note
    row.updated_at = _timestamp()
    db.flush()

    logger.info(
        f"Saved extra window {start_time or '?'}-{end_time or '?'} "
        f"for provider {provider_id} on {target_date}"
    )
    return row


# ── Helpers ─────────────────────────────────────────────────────────────


def _validate_scope(time_slot: str | None) -> str | None:
    if time_slot is None or time_slot == "":
        return None
    if time_slot not in OVERRIDE_SCOPES:
        raise InvalidArgumentError('timeSlot must be "morning", "afternoon" or "full_day"')
    return time_slot


def _overrides_on(db: Session, provider_id: int, target_date: date):
    return db.query(AvailabilityOverrides).filter(
        AvailabilityOverrides.provider_id == provider_id,
        AvailabilityOverrides.date == target_date.isoformat(),
    )


def _scope_matches(scope: str):
    if scope == FULL_DAY:
        return or_(
            AvailabilityOverrides.time_slot == FULL_DAY,
            AvailabilityOverrides.time_slot.is_(None),
        )
    return AvailabilityOverrides.time_slot == scope


def _lock_override_key(db: Session, provider_id: int, target_date: date) -> None:
    """
    Serialize writers on one (provider, date) for the current transaction.

    PostgreSQL: transaction-scoped advisory lock on the key.
    SQLite: the database write lock, taken before the date's rows are read.
    pysqlite only opens a transaction at the first DML statement, so reads
    before that would otherwise run unlocked.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        conn = db.connection()
        # An implicit transaction already holds the write lock
        if not conn.connection.dbapi_connection.in_transaction:
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        return
    if dialect != "postgresql":
        return
    digest = hashlib.sha256(f"{provider_id}:{target_date.isoformat()}".encode("utf-8")).digest()
    key = int.from_bytes(digest[:8], "big", signed=True)
    db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
