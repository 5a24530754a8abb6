"""Outbound email adapters."""

from __future__ import annotations

from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol

import aiosmtplib

from ..config import MailConfig
from .logging import get_logger

__all__ = [
    "LoggingMailer",
    "Mailer",
    "MailerError",
    "SmtpMailer",
    "build_mailer",
]

logger = get_logger(__name__)


class MailerError(RuntimeError):
    """Raised when a message could not be handed to the mail server."""

    def __init__(self, message: str, *, smtp_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.smtp_code = smtp_code


class Mailer(Protocol):  # pragma: no cover - interface only
    """Sends one fully rendered message."""

    async def send(self, message: EmailMessage) -> None: ...


@dataclass
class SmtpMailer:
    """aiosmtplib-backed mailer using one connection per message."""

    hostname: str
    port: int
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = False
    start_tls: bool = True
    timeout: float = 30.0

    async def send(self, message: EmailMessage) -> None:
        try:
            await aiosmtplib.send(
                message,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
                start_tls=None if self.use_tls else self.start_tls,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPResponseException as exc:
            raise MailerError(
                f"{exc.code} {exc.message}", smtp_code=exc.code
            ) from exc
        except (aiosmtplib.SMTPException, OSError) as exc:
            raise MailerError(str(exc) or exc.__class__.__name__) from exc
        logger.info(
            "mail_sent",
            extra={"to": message["To"], "smtp_host": self.hostname},
        )


class LoggingMailer:
    """Mailer used when delivery is disabled; records the message in the log."""

    async def send(self, message: EmailMessage) -> None:
        logger.info(
            "mail_delivery_skipped",
            extra={"to": message["To"], "subject": message["Subject"]},
        )


def build_mailer(config: MailConfig) -> Mailer:
    """Return the SMTP mailer when mail is enabled, else the logging one."""

    if not config.enabled:
        return LoggingMailer()
    return SmtpMailer(
        hostname=config.host,
        port=config.port,
        username=config.username,
        password=config.password,
        use_tls=config.use_tls,
        start_tls=config.start_tls,
        timeout=config.timeout_seconds,
    )
