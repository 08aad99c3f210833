#!/usr/bin/env python3
"""Seed the sample builds into the configured database."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.database import SessionLocal, init_db
from app.services.bootstrap import SAMPLE_BUILDS, seed_sample_builds
from app.storage import DatabaseStorage


def main():
    init_db()
    db = SessionLocal()
    try:
        created = seed_sample_builds(DatabaseStorage(db))
    finally:
        db.close()
    print(f"Seeded {created} builds ({len(SAMPLE_BUILDS) - created} already existed).")


if __name__ == "__main__":
    main()
