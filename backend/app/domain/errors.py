"""Domain exceptions shared by the entry, image and notification services."""

from __future__ import annotations

from contextlib import contextmanager
from http import HTTPStatus
from typing import Any, Dict, Iterator

from sqlalchemy.exc import SQLAlchemyError

from ..infra.logging import get_logger

__all__ = [
    "NotFoundError",
    "NotificationError",
    "ServiceError",
    "StorageError",
    "ValidationError",
    "sql_storage_errors",
]

logger = get_logger(__name__)


class ServiceError(Exception):
    """Domain exception propagated to API handlers."""

    default_status = HTTPStatus.INTERNAL_SERVER_ERROR
    default_code = "CD-INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        status_code: HTTPStatus | None = None,
        error_code: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code or self.default_status
        self.error_code = error_code or self.default_code
        self.message = message
        self.details = details or {}


class ValidationError(ServiceError):
    """A required field is missing or blank."""

    default_status = HTTPStatus.UNPROCESSABLE_ENTITY
    default_code = "CD-INVALID-REQUEST"


class NotFoundError(ServiceError):
    """An identifier does not resolve to a stored record."""

    default_status = HTTPStatus.NOT_FOUND
    default_code = "CD-NOT-FOUND"

    @classmethod
    def for_record(cls, kind: str, record_id: str) -> "NotFoundError":
        return cls(
            f"{kind.title()} '{record_id}' not found",
            details={"id": record_id, "resource": kind},
        )


class StorageError(ServiceError):
    """A database or filesystem operation failed."""

    default_status = HTTPStatus.INTERNAL_SERVER_ERROR
    default_code = "CD-STORAGE-FAILED"


class NotificationError(ServiceError):
    """The confirmation email could not be delivered."""

    default_status = HTTPStatus.BAD_GATEWAY
    default_code = "CD-NOTIFICATION-FAILED"


@contextmanager
def sql_storage_errors(
    table: str, operation: str, record_id: str | None = None
) -> Iterator[None]:
    """Re-raise ``SQLAlchemyError`` from the wrapped block as :class:`StorageError`."""

    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(
            "database_operation_failed",
            exc_info=True,
            extra={"table": table, "operation": operation, "record_id": record_id},
        )
        raise StorageError(
            f"Database {operation} on {table} failed",
            details={"table": table, "operation": operation},
        ) from exc
