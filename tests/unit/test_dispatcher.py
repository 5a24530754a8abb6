"""Tests for confirmation email rendering and delivery."""

from __future__ import annotations

import asyncio

import pytest

from backend.app.config import MailConfig
from backend.app.domain.entries import Entry
from backend.app.domain.errors import NotificationError
from backend.app.domain.notifications import ConfirmationDispatcher, deliver_confirmation
from backend.app.domain.notifications import dispatcher as dispatcher_module
from tests.helpers.doubles import RecordingMailer, RecordingMetrics
from tests.helpers.logging import RecordingLogger, assert_extra_contains, find_log

pytestmark = [pytest.mark.notifications]


def _dispatcher(mailer, metrics=None, **config) -> ConfirmationDispatcher:
    mail_config = MailConfig(username="desk@example.com", **config)
    return ConfirmationDispatcher.from_config(mail_config, mailer=mailer, metrics=metrics)


def test_render_fills_templates_from_entry(sample_entry):
    entry = Entry.new(sample_entry)
    dispatcher = _dispatcher(
        RecordingMailer(),
        confirmation_subject="Thanks $name",
        confirmation_body="We will reach you at $phone in $place. $unknown",
    )

    message = dispatcher.render(entry)

    assert message["From"] == "desk@example.com"
    assert message["To"] == "ada@example.com"
    assert message["Subject"] == "Thanks Ada Lovelace"
    body = message.get_content()
    assert "+44 20 7946 0018 in London" in body
    assert "$unknown" in body


def test_sender_prefers_explicit_sender(sample_entry):
    dispatcher = _dispatcher(RecordingMailer(), sender="Contact Desk <hello@example.com>")

    message = dispatcher.render(Entry.new(sample_entry))

    assert message["From"] == "Contact Desk <hello@example.com>"


def test_dispatch_sends_through_mailer(sample_entry):
    mailer = RecordingMailer()
    metrics = RecordingMetrics()
    entry = Entry.new(sample_entry)

    asyncio.run(_dispatcher(mailer, metrics).dispatch(entry))

    assert [message["To"] for message in mailer.sent] == [entry.email]
    assert metrics.count("notifications_sent_total") == 1


def test_dispatch_wraps_mailer_failure(sample_entry):
    metrics = RecordingMetrics()
    entry = Entry.new(sample_entry)
    dispatcher = _dispatcher(RecordingMailer(fail_with="550 mailbox unavailable"), metrics)

    with pytest.raises(NotificationError) as exc_info:
        asyncio.run(dispatcher.dispatch(entry))

    assert exc_info.value.error_code == "CD-NOTIFICATION-FAILED"
    assert exc_info.value.details == {
        "entry_id": entry.id,
        "reason": "550 mailbox unavailable",
    }
    assert metrics.count("notifications_failed_total") == 1


def test_dispatch_rejects_header_injection(sample_entry):
    entry = Entry.new({**sample_entry, "email": "ada@example.com\nBcc: x@example.com"})
    mailer = RecordingMailer()

    with pytest.raises(NotificationError):
        asyncio.run(_dispatcher(mailer).dispatch(entry))

    assert mailer.sent == []


def test_deliver_confirmation_logs_failure_without_raising(monkeypatch, sample_entry):
    recorder = RecordingLogger()
    monkeypatch.setattr(dispatcher_module, "logger", recorder)
    entry = Entry.new(sample_entry)
    dispatcher = _dispatcher(RecordingMailer(fail_with="connection refused"))

    asyncio.run(deliver_confirmation(dispatcher, entry))

    record = find_log(recorder.records, level="error", event="entry_confirmation_failed")
    assert_extra_contains(record, entry_id=entry.id, reason="connection refused")


def test_deliver_confirmation_logs_unparseable_address(monkeypatch, sample_entry):
    recorder = RecordingLogger()
    monkeypatch.setattr(dispatcher_module, "logger", recorder)
    metrics = RecordingMetrics()
    mailer = RecordingMailer()
    entry = Entry.new({**sample_entry, "email": "a@[1.2.3"})

    asyncio.run(deliver_confirmation(_dispatcher(mailer, metrics), entry))

    record = find_log(recorder.records, level="error", event="entry_confirmation_failed")
    assert_extra_contains(record, entry_id=entry.id)
    assert mailer.sent == []
    assert metrics.count("notifications_failed_total") == 1
    assert metrics.count("notifications_sent_total") == 0
