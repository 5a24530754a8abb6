"""Process-local counters and gauges reported through the health endpoint."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock
from typing import DefaultDict, Dict, Protocol

from .logging import get_logger

logger = get_logger(__name__)


class MetricsClient(Protocol):  # pragma: no cover - interface only
    """Basic counter/gauge interface consumed by the services."""

    def increment(self, metric: str, value: int = 1) -> None: ...

    def gauge(self, metric: str, value: int) -> None: ...


@dataclass
class InMemoryMetricsClient:
    """Metrics sink kept in memory for the lifetime of the process."""

    counters: DefaultDict[str, int] = field(default_factory=lambda: defaultdict(int))
    gauges: Dict[str, int] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False)

    def increment(self, metric: str, value: int = 1) -> None:
        with self._lock:
            self.counters[metric] += value
        logger.debug("metrics_increment", extra={"metric": metric, "value": value})

    def gauge(self, metric: str, value: int) -> None:
        with self._lock:
            self.gauges[metric] = value
        logger.debug("metrics_gauge", extra={"metric": metric, "value": value})

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Return a copy of every counter and gauge."""

        with self._lock:
            return {"counters": dict(self.counters), "gauges": dict(self.gauges)}


def safe_increment(metrics: MetricsClient, metric: str, value: int = 1) -> None:
    """Increment ``metric`` without letting a broken sink fail the request."""

    try:
        metrics.increment(metric, value)
    except Exception:  # pragma: no cover
        logger.exception(
            "metrics_increment_failed",
            extra={"metric": metric, "value": value},
        )
