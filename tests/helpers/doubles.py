"""Recording stand-ins for the mailer and metrics seams."""

from __future__ import annotations

from email.message import EmailMessage
from typing import List, Optional

from backend.app.infra.mailer import Mailer, MailerError
from backend.app.infra.metrics import MetricsClient


class RecordingMailer(Mailer):
    """Keeps every message; raises ``MailerError`` when ``fail_with`` is set."""

    def __init__(self, *, fail_with: Optional[str] = None) -> None:
        self.sent: List[EmailMessage] = []
        self.fail_with = fail_with

    async def send(self, message: EmailMessage) -> None:
        if self.fail_with is not None:
            raise MailerError(self.fail_with, smtp_code=550)
        self.sent.append(message)


class RecordingMetrics(MetricsClient):
    def __init__(self) -> None:
        self.increments: list[tuple[str, int]] = []
        self.gauges: list[tuple[str, int]] = []

    def increment(self, metric: str, value: int = 1) -> None:
        self.increments.append((metric, value))

    def gauge(self, metric: str, value: int) -> None:
        self.gauges.append((metric, value))

    def count(self, metric: str) -> int:
        return sum(value for name, value in self.increments if name == metric)
