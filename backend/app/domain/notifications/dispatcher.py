"""Confirmation emails for new contact entries."""

from __future__ import annotations

from email.message import EmailMessage
from string import Template

from ...config import MailConfig
from ...infra.logging import get_logger
from ...infra.mailer import Mailer, MailerError
from ...infra.metrics import InMemoryMetricsClient, MetricsClient, safe_increment
from ..entries.types import Entry
from ..errors import NotificationError

__all__ = ["ConfirmationDispatcher", "deliver_confirmation"]

logger = get_logger(__name__)


class ConfirmationDispatcher:
    """Renders the confirmation template for an entry and sends it."""

    def __init__(
        self,
        *,
        mailer: Mailer,
        sender: str,
        subject_template: str,
        body_template: str,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._mailer = mailer
        self._sender = sender
        self._subject = Template(subject_template)
        self._body = Template(body_template)
        self._metrics = metrics or InMemoryMetricsClient()

    @classmethod
    def from_config(
        cls,
        config: MailConfig,
        *,
        mailer: Mailer,
        metrics: MetricsClient | None = None,
    ) -> "ConfirmationDispatcher":
        return cls(
            mailer=mailer,
            sender=config.sender or config.username or "no-reply@localhost",
            subject_template=config.confirmation_subject,
            body_template=config.confirmation_body,
            metrics=metrics,
        )

    def render(self, entry: Entry) -> EmailMessage:
        context = entry.fields()
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = entry.email
        message["Subject"] = self._subject.safe_substitute(context)
        message.set_content(self._body.safe_substitute(context))
        return message

    async def dispatch(self, entry: Entry) -> None:
        """Send the confirmation for ``entry``; raises :class:`NotificationError`."""

        try:
            message = self.render(entry)
        except Exception as exc:
            raise self._failure(entry, "Failed to render confirmation email", exc) from exc
        try:
            await self._mailer.send(message)
        except (MailerError, ValueError) as exc:
            raise self._failure(entry, "Failed to send confirmation email", exc) from exc
        safe_increment(self._metrics, "notifications_sent_total")
        logger.info("entry_confirmation_sent", extra={"entry_id": entry.id})

    def _failure(self, entry: Entry, message: str, exc: Exception) -> NotificationError:
        safe_increment(self._metrics, "notifications_failed_total")
        return NotificationError(
            message,
            details={"entry_id": entry.id, "reason": str(exc) or type(exc).__name__},
        )


async def deliver_confirmation(dispatcher: ConfirmationDispatcher, entry: Entry) -> None:
    """Background-task wrapper: the entry is already saved, so failures are only logged."""

    try:
        await dispatcher.dispatch(entry)
    except NotificationError as exc:
        logger.error(
            "entry_confirmation_failed",
            exc_info=True,
            extra={"entry_id": entry.id, **exc.details},
        )
