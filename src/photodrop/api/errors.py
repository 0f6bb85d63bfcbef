"""API error type and its JSON rendering.

Every failure response has the same envelope::

    {"success": false, "message": "...", "error": "..."}

``error`` is only present when an underlying driver message is passed through
(store failures).
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error that should reach the client as-is.

    Args:
        status_code: HTTP status to respond with.
        message: Human-readable summary.
        error: Optional underlying error message to pass through.
    """

    def __init__(self, status_code: int, message: str, error: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error

    def to_content(self) -> dict:
        content: dict = {"success": False, "message": self.message}
        if self.error is not None:
            content["error"] = self.error
        return content


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on *app*.

    Besides :class:`ApiError`, Starlette's own ``HTTPException`` (raised for
    malformed form bodies, unknown routes and missing static files) is
    rendered in the same envelope.
    """

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "ApiError in %s %s: %s (%s)",
                request.method,
                request.url.path,
                exc.message,
                exc.error,
            )
        else:
            logger.info(
                "ApiError in %s %s: %s", request.method, request.url.path, exc.message
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.info(
            "HTTP %s in %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
