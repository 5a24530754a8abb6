"""Shared API dependencies.

``create_app`` builds one :class:`ServiceContainer` and stores it on
``app.state.services``; the dependency functions below read from it so tests
can swap any piece through ``app.dependency_overrides``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from ..config import Settings
from ..domain.entries import EntryService, SqlEntryRepository
from ..domain.images import ImageService, LocalUploadStorage, SqlImageRepository
from ..domain.notifications import ConfirmationDispatcher
from ..infra.db import build_engine, create_schema
from ..infra.mailer import Mailer, build_mailer
from ..infra.metrics import InMemoryMetricsClient

__all__ = [
    "ServiceContainer",
    "build_service_container",
    "get_base_url",
    "get_dispatcher",
    "get_entry_service",
    "get_image_service",
    "get_services",
    "get_settings",
    "get_upload_storage",
]


@dataclass
class ServiceContainer:
    """Process-wide collaborators shared by every request."""

    settings: Settings
    engine: Optional[Engine]
    metrics: InMemoryMetricsClient
    storage: LocalUploadStorage
    entry_service: EntryService
    image_service: ImageService
    dispatcher: ConfirmationDispatcher


def build_service_container(
    settings: Settings,
    *,
    engine: Engine | None = None,
    mailer: Mailer | None = None,
    metrics: InMemoryMetricsClient | None = None,
) -> ServiceContainer:
    """Wire the SQL-backed services described by ``settings``."""

    metrics = metrics or InMemoryMetricsClient()
    if engine is None:
        engine = build_engine(settings.database.url, echo=settings.database.echo)
    if settings.database.create_schema:
        create_schema(engine)
    storage = LocalUploadStorage(settings.uploads.directory)
    return ServiceContainer(
        settings=settings,
        engine=engine,
        metrics=metrics,
        storage=storage,
        entry_service=EntryService(
            repository=SqlEntryRepository(engine), metrics=metrics
        ),
        image_service=ImageService(
            storage=storage,
            repository=SqlImageRepository(engine),
            metrics=metrics,
        ),
        dispatcher=ConfirmationDispatcher.from_config(
            settings.mail,
            mailer=mailer or build_mailer(settings.mail),
            metrics=metrics,
        ),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_settings(services: ServiceContainer = Depends(get_services)) -> Settings:
    return services.settings


def get_entry_service(services: ServiceContainer = Depends(get_services)) -> EntryService:
    return services.entry_service


def get_image_service(services: ServiceContainer = Depends(get_services)) -> ImageService:
    return services.image_service


def get_dispatcher(
    services: ServiceContainer = Depends(get_services),
) -> ConfirmationDispatcher:
    return services.dispatcher


def get_upload_storage(
    services: ServiceContainer = Depends(get_services),
) -> LocalUploadStorage:
    return services.storage


def get_base_url(request: Request, settings: Settings = Depends(get_settings)) -> str:
    """Public origin used to build image URLs; falls back to the request's."""

    return settings.http.base_url or str(request.base_url)
