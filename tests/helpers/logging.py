"""Capture structured log calls made through a module-level ``logger``."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List


class RecordingLogger:
    """Drop-in for a module's ``logger``; keeps each call's event and extra."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def _record(self, level: str, event: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(
            {
                "level": level,
                "event": event,
                "args": args,
                "exc_info": kwargs.get("exc_info"),
                "extra": dict(kwargs.get("extra") or {}),
            }
        )

    def debug(self, event: str, *args: Any, **kwargs: Any) -> None:
        self._record("debug", event, *args, **kwargs)

    def info(self, event: str, *args: Any, **kwargs: Any) -> None:
        self._record("info", event, *args, **kwargs)

    def warning(self, event: str, *args: Any, **kwargs: Any) -> None:
        self._record("warning", event, *args, **kwargs)

    def error(self, event: str, *args: Any, **kwargs: Any) -> None:
        self._record("error", event, *args, **kwargs)

    def exception(self, event: str, *args: Any, **kwargs: Any) -> None:
        self._record("exception", event, *args, **kwargs)

    def events(self) -> List[str]:
        return [record["event"] for record in self.records]


def find_log(
    records: List[Dict[str, Any]], *, level: str, event: str
) -> Dict[str, Any]:
    for record in records:
        if record["level"] == level and record["event"] == event:
            return record
    raise AssertionError(f"Event '{event}' at level '{level}' not logged")


def assert_extra_contains(record: Dict[str, Any], **expected: Any) -> None:
    extra = record.get("extra") or {}
    for key, value in expected.items():
        assert extra.get(key) == value, (
            f"Expected extra['{key}'] == {value!r}, found {extra.get(key)!r}"
        )


def assert_extra_has_keys(record: Dict[str, Any], keys: Iterable[str]) -> None:
    extra = record.get("extra") or {}
    missing = [key for key in keys if key not in extra]
    assert not missing, f"Missing keys in log extra: {missing}"
