"""
Schema bootstrap and data migrations.

    python backend/migrate.py

1. Creates missing tables.
2. Rewrites legacy NULL-scoped full-day blocks to the "full_day" scope.
"""

import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parent))

from availability.database import SessionLocal, engine
from availability.models import AvailabilityOverrides, Base
from availability.services.slots.overrides import migrate_legacy_full_day_blocks


def apply_migrations():
    print(f"Using DB: {engine.url.render_as_string(hide_password=True)}")

    Base.metadata.create_all(bind=engine)
    # create_all skips indexes on tables that already exist
    for index in AvailabilityOverrides.__table__.indexes:
        index.create(bind=engine, checkfirst=True)
    print("✔ Schema up to date")

    db = SessionLocal()
    try:
        migrated = migrate_legacy_full_day_blocks(db)
    finally:
        db.close()
    print(f"✔ Migrated {migrated} legacy full-day block(s)")

    print("All migrations applied.")


if __name__ == "__main__":
    apply_migrations()
