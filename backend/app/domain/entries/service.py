"""Entry service orchestrating validation + persistence."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ...infra.logging import get_logger
from ...infra.metrics import InMemoryMetricsClient, MetricsClient, safe_increment
from ..errors import ValidationError
from .repository import EntryRepository, InMemoryEntryRepository
from .types import ENTRY_FIELDS, Entry

logger = get_logger(__name__)


class EntryService:
    """Validation layer over entry persistence."""

    def __init__(
        self,
        *,
        repository: EntryRepository | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._repository = repository or InMemoryEntryRepository()
        self._metrics = metrics or InMemoryMetricsClient()

    def create(self, payload: Mapping[str, Any]) -> Entry:
        fields = self._require_fields(payload)
        entry = self._repository.create(Entry.new(fields))
        safe_increment(self._metrics, "entries_created_total")
        logger.info("entry_created", extra={"entry_id": entry.id})
        return entry

    def list(self) -> List[Entry]:
        return self._repository.list()

    def get(self, entry_id: str) -> Entry:
        return self._repository.get(entry_id)

    def update(self, entry_id: str, payload: Mapping[str, Any]) -> Entry:
        current = self._repository.get(entry_id)
        changes = self._normalize_changes(payload)
        if not changes:
            return current
        updated = self._repository.update(entry_id, changes)
        safe_increment(self._metrics, "entries_updated_total")
        logger.info(
            "entry_updated",
            extra={"entry_id": entry_id, "fields": sorted(changes)},
        )
        return updated

    def delete(self, entry_id: str) -> Entry:
        removed = self._repository.delete(entry_id)
        safe_increment(self._metrics, "entries_deleted_total")
        logger.info("entry_deleted", extra={"entry_id": entry_id})
        return removed

    @staticmethod
    def _require_fields(payload: Mapping[str, Any]) -> Dict[str, str]:
        missing = [name for name in ENTRY_FIELDS if not _is_present(payload.get(name))]
        if missing:
            logger.warning("entry_rejected_missing_fields", extra={"fields": missing})
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                details={"fields": missing},
            )
        return {name: payload[name] for name in ENTRY_FIELDS}

    @staticmethod
    def _normalize_changes(payload: Mapping[str, Any]) -> Dict[str, str]:
        changes = {
            name: payload[name]
            for name in ENTRY_FIELDS
            if payload.get(name) is not None
        }
        blank = [name for name, value in changes.items() if not _is_present(value)]
        if blank:
            raise ValidationError(
                f"Fields cannot be blank: {', '.join(blank)}",
                details={"fields": blank},
            )
        return changes


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
