"""System health endpoint."""

import os
from typing import Any

from fastapi import APIRouter, Depends

from ...api.dependencies import ServiceContainer, get_services
from ...infra.db import ping

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/healthz")
def healthcheck(services: ServiceContainer = Depends(get_services)) -> dict[str, Any]:
    """Return coarse-grained backend readiness information."""

    database_ok = services.engine is not None and ping(services.engine)
    uploads_root = services.storage.root
    uploads_ok = uploads_root.is_dir() and os.access(uploads_root, os.W_OK)

    return {
        "status": "ok" if database_ok and uploads_ok else "degraded",
        "environment": services.settings.environment,
        "database": "ok" if database_ok else "unavailable",
        "uploads": {"directory": str(uploads_root), "writable": uploads_ok},
        "mail": {"enabled": services.settings.mail.enabled},
        "metrics": services.metrics.snapshot(),
    }
