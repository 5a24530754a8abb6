"""Contact entry domain package."""

from .repository import EntryRepository, InMemoryEntryRepository, SqlEntryRepository
from .service import EntryService
from .types import ENTRY_FIELDS, Entry

__all__ = [
    "ENTRY_FIELDS",
    "Entry",
    "EntryRepository",
    "EntryService",
    "InMemoryEntryRepository",
    "SqlEntryRepository",
]
