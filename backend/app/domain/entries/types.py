"""Contact-form entry records."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

__all__ = ["ENTRY_FIELDS", "Entry", "as_utc", "utcnow"]

# Business fields a submission must carry; all are free text.
ENTRY_FIELDS: tuple[str, ...] = ("name", "phone", "email", "place", "message")


def utcnow() -> datetime:
    """Return timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from SQLite."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Entry:
    """A stored contact-form submission."""

    id: str
    name: str
    phone: str
    email: str
    place: str
    message: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(
        cls,
        fields: Mapping[str, str],
        *,
        entry_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> "Entry":
        """Build a fresh entry with a generated id and matching timestamps."""

        ts = timestamp or utcnow()
        return cls(
            id=entry_id or str(uuid4()),
            name=fields["name"],
            phone=fields["phone"],
            email=fields["email"],
            place=fields["place"],
            message=fields["message"],
            created_at=ts,
            updated_at=ts,
        )

    def with_changes(self, changes: Mapping[str, str]) -> "Entry":
        """Return a copy with ``changes`` merged and ``updated_at`` refreshed."""

        merged = {key: value for key, value in changes.items() if key in ENTRY_FIELDS}
        return replace(self, **merged, updated_at=utcnow())

    def fields(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in ENTRY_FIELDS}
