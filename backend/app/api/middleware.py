"""HTTP middleware shared by every route."""

from __future__ import annotations

from http import HTTPStatus
from typing import Mapping

from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..domain.errors import ServiceError
from ..infra.logging import get_logger
from .errors import error_payload

__all__ = [
    "DEFAULT_SECURITY_HEADERS",
    "SecurityHeadersMiddleware",
    "UnhandledErrorMiddleware",
]

logger = get_logger(__name__)

DEFAULT_SECURITY_HEADERS: Mapping[str, str] = {
    # Uploaded files are fetched by the frontend on a sibling origin.
    "Cross-Origin-Resource-Policy": "same-site",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


class SecurityHeadersMiddleware:
    """Add the security headers to every HTTP response unless already set."""

    def __init__(
        self, app: ASGIApp, headers: Mapping[str, str] | None = None
    ) -> None:
        self.app = app
        self._headers = [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or DEFAULT_SECURITY_HEADERS).items()
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                raw = list(message.get("headers", []))
                present = {name.lower() for name, _ in raw}
                raw.extend(
                    (name, value)
                    for name, value in self._headers
                    if name not in present
                )
                message["headers"] = raw
            await send(message)

        await self.app(scope, receive, send_with_headers)


class UnhandledErrorMiddleware:
    """Render uncaught exceptions as the 500 error envelope.

    Installed innermost so the response still passes through the CORS and
    security header middleware on its way out.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except Exception as exc:
            logger.error(
                "request_crashed",
                exc_info=exc,
                extra={"path": scope.get("path"), "method": scope.get("method")},
            )
            if response_started:
                raise
            response = JSONResponse(
                status_code=int(HTTPStatus.INTERNAL_SERVER_ERROR),
                content=error_payload(
                    ServiceError.default_code, "An unexpected error occurred"
                ),
            )
            await response(scope, receive, send)
