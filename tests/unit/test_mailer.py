"""Tests for the aiosmtplib-backed mailer and the mailer factory."""

from __future__ import annotations

import asyncio
from email.message import EmailMessage

import aiosmtplib
import pytest

from backend.app.config import MailConfig
from backend.app.infra import mailer as mailer_module
from backend.app.infra.mailer import LoggingMailer, MailerError, SmtpMailer, build_mailer

pytestmark = [pytest.mark.notifications]


def _message() -> EmailMessage:
    message = EmailMessage()
    message["From"] = "desk@example.com"
    message["To"] = "ada@example.com"
    message["Subject"] = "Thanks"
    message.set_content("Hello")
    return message


def test_build_mailer_returns_logging_mailer_when_disabled():
    assert isinstance(build_mailer(MailConfig(enabled=False)), LoggingMailer)


def test_build_mailer_returns_smtp_mailer_when_enabled():
    mailer = build_mailer(
        MailConfig(
            enabled=True,
            host="smtp.example.com",
            port=465,
            username="u",
            password="p",
            use_tls=True,
            timeout_seconds=5,
        )
    )

    assert isinstance(mailer, SmtpMailer)
    assert (mailer.hostname, mailer.port, mailer.use_tls, mailer.timeout) == (
        "smtp.example.com",
        465,
        True,
        5,
    )


def test_smtp_mailer_passes_connection_options(monkeypatch):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append((message, kwargs))

    monkeypatch.setattr(mailer_module.aiosmtplib, "send", fake_send)
    mailer = SmtpMailer(hostname="smtp.example.com", port=587, username="u", password="p")
    message = _message()

    asyncio.run(mailer.send(message))

    assert calls[0][0] is message
    assert calls[0][1]["hostname"] == "smtp.example.com"
    assert calls[0][1]["start_tls"] is True
    assert calls[0][1]["use_tls"] is False


def test_smtp_mailer_maps_response_errors(monkeypatch):
    async def fake_send(message, **kwargs):
        raise aiosmtplib.SMTPResponseException(535, "Authentication failed")

    monkeypatch.setattr(mailer_module.aiosmtplib, "send", fake_send)

    with pytest.raises(MailerError) as exc_info:
        asyncio.run(SmtpMailer(hostname="smtp.example.com", port=587).send(_message()))

    assert exc_info.value.smtp_code == 535
    assert "Authentication failed" in str(exc_info.value)


def test_smtp_mailer_maps_connection_errors(monkeypatch):
    async def fake_send(message, **kwargs):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(mailer_module.aiosmtplib, "send", fake_send)

    with pytest.raises(MailerError) as exc_info:
        asyncio.run(SmtpMailer(hostname="smtp.example.com", port=587).send(_message()))

    assert exc_info.value.smtp_code is None


def test_logging_mailer_never_raises():
    asyncio.run(LoggingMailer().send(_message()))
