"""FastAPI entrypoint for the Contact Desk backend."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import ServiceContainer, build_service_container
from .api.errors import register_exception_handlers
from .api.middleware import SecurityHeadersMiddleware, UnhandledErrorMiddleware
from .api.routers import entries, gallery, health, images, uploads
from .config import Settings, ensure_required_settings, load_settings
from .infra.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """Instantiate the FastAPI app, its services and routers."""

    settings = settings or (container.settings if container else load_settings())
    ensure_required_settings(settings)
    configure_logging(settings.logging.level, json_output=settings.logging.json)

    services = container or build_service_container(settings)
    services.storage.ensure_root()

    application = FastAPI(title="Contact Desk API", version="0.1.0")
    application.state.services = services
    # add_middleware prepends, so the error middleware ends up innermost.
    application.add_middleware(UnhandledErrorMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.http.client_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(SecurityHeadersMiddleware)
    register_exception_handlers(application)

    routers = [health.router, entries.router, images.router, uploads.router]
    if settings.http.legacy_image_routes:
        routers.append(gallery.router)
    for router in routers:
        application.include_router(router)

    logger.info(
        "app_created",
        extra={
            "environment": settings.environment,
            "uploads_dir": str(services.storage.root),
            "mail_enabled": settings.mail.enabled,
            "legacy_image_routes": settings.http.legacy_image_routes,
        },
    )
    return application


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""

    settings = app.state.services.settings
    uvicorn.run(app, host=settings.http.host, port=settings.http.port)


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    run()
