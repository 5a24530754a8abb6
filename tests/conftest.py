"""Shared fixtures; seeds the environment before ``backend.app.main`` is imported."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

_SESSION_ROOT = Path(tempfile.mkdtemp(prefix="contact-desk-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_SESSION_ROOT / 'session.db'}")
os.environ.setdefault("DATABASE_CREATE_SCHEMA", "1")
os.environ.setdefault("UPLOADS_DIR", str(_SESSION_ROOT / "uploads"))
os.environ.setdefault("MAIL_ENABLED", "0")

from backend.app.api.dependencies import build_service_container  # noqa: E402
from backend.app.config import (  # noqa: E402
    DatabaseConfig,
    HttpConfig,
    Settings,
    UploadsConfig,
)
from backend.app.infra.db import build_engine, create_schema  # noqa: E402
from backend.app.main import create_app  # noqa: E402
from tests.helpers.doubles import RecordingMailer  # noqa: E402

SAMPLE_ENTRY = {
    "name": "Ada Lovelace",
    "phone": "+44 20 7946 0018",
    "email": "ada@example.com",
    "place": "London",
    "message": "Please call me back about the workshop.",
}


@pytest.fixture
def sample_entry() -> dict[str, str]:
    return dict(SAMPLE_ENTRY)


@pytest.fixture
def sqlite_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'contact_desk.db'}")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database=DatabaseConfig(
            url=f"sqlite:///{tmp_path / 'app.db'}", create_schema=True
        ),
        http=HttpConfig(client_origin="http://frontend.test"),
        uploads=UploadsConfig(directory=str(tmp_path / "uploads")),
    )


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def app(settings, mailer):
    container = build_service_container(settings, mailer=mailer)
    application = create_app(settings, container=container)
    yield application
    container.engine.dispose()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
