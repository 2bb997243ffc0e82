from datetime import date

from availability.services.slots.cache_store import (
    CachedStatus,
    PublicAvailabilityStore,
)


def test_lookup_is_three_valued(db, add_cache_row):
    add_cache_row("cal-1", "2025-02-01", "busy", None)
    store = PublicAvailabilityStore(db)

    assert store.lookup("cal-1", date(2025, 2, 1), "morning") is CachedStatus.BUSY
    assert store.lookup("cal-1", date(2025, 2, 1), "afternoon") is CachedStatus.NO_ENTRY
    assert store.lookup("cal-1", date(2025, 2, 2), "morning") is CachedStatus.NO_ENTRY
    assert store.lookup("other", date(2025, 2, 1), "morning") is CachedStatus.NO_ENTRY


def test_get_range_skips_unparseable_dates(db, add_cache_row):
    add_cache_row("cal-1", "2025-02-01", "unavailable", "available")
    add_cache_row("cal-1", "2025-02-0x", "busy", "busy")
    add_cache_row("cal-1", "2025-03-01", "busy", "busy")

    entries = PublicAvailabilityStore(db).get_range("cal-1", date(2025, 2, 1), date(2025, 2, 28))

    assert list(entries) == [date(2025, 2, 1)]
    assert entries[date(2025, 2, 1)].has_block


def test_upsert_replaces_existing_row(db, add_cache_row):
    add_cache_row("cal-1", "2025-02-01", "unavailable", "unavailable")
    store = PublicAvailabilityStore(db)

    written = store.upsert_entries("cal-1", [
        (date(2025, 2, 1), "available", None),
        (date(2025, 2, 2), "busy", "busy"),
    ])
    db.commit()

    assert written == 2
    entries = store.get_range("cal-1", date(2025, 2, 1), date(2025, 2, 2))
    assert entries[date(2025, 2, 1)].morning is CachedStatus.AVAILABLE
    assert entries[date(2025, 2, 1)].afternoon is CachedStatus.NO_ENTRY
    assert entries[date(2025, 2, 2)].afternoon is CachedStatus.BUSY


def test_upsert_nothing(db):
    assert PublicAvailabilityStore(db).upsert_entries("cal-1", []) == 0
