"""Seed a few sample contact entries for local development.

Idempotent: entries whose fixed ids already exist are left untouched.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from sqlalchemy.engine import Engine

from backend.app.config import ensure_required_settings, load_settings
from backend.app.domain.entries import Entry, SqlEntryRepository
from backend.app.domain.errors import NotFoundError
from backend.app.infra.db import build_engine, create_schema


def build_seed_entries(timestamp: datetime) -> List[Entry]:
    return [
        Entry.new(
            {
                "name": "Ada Lovelace",
                "phone": "+44 20 7946 0018",
                "email": "ada@example.com",
                "place": "London",
                "message": "Interested in the analytical engine workshop.",
            },
            entry_id="00000000-0000-0000-0000-000000000001",
            timestamp=timestamp,
        ),
        Entry.new(
            {
                "name": "Grace Hopper",
                "phone": "+1 202 555 0143",
                "email": "grace@example.com",
                "place": "Arlington",
                "message": "Could you send over the compiler course schedule?",
            },
            entry_id="00000000-0000-0000-0000-000000000002",
            timestamp=timestamp,
        ),
        Entry.new(
            {
                "name": "Alan Turing",
                "phone": "+44 161 496 0729",
                "email": "alan@example.com",
                "place": "Manchester",
                "message": "Please call back regarding the partnership.",
            },
            entry_id="00000000-0000-0000-0000-000000000003",
            timestamp=timestamp,
        ),
    ]


def seed_entries(engine: Engine) -> int:
    """Insert missing seed entries and return how many were created."""

    repository = SqlEntryRepository(engine)
    inserted = 0
    for entry in build_seed_entries(datetime.now(timezone.utc)):
        try:
            repository.get(entry.id)
        except NotFoundError:
            repository.create(entry)
            inserted += 1
    return inserted


def main() -> None:
    settings = ensure_required_settings(load_settings())
    engine = build_engine(settings.database.url)
    if settings.database.create_schema:
        create_schema(engine)
    inserted = seed_entries(engine)
    print(f"Seeded {inserted} contact entries.")


if __name__ == "__main__":
    main()
