"""Reject oversized uploads before their body is fully read."""

from __future__ import annotations

import logging

from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

#: Room for multipart boundaries, part headers and small text fields.
MULTIPART_ALLOWANCE = 64 * 1024


class _BodyTooLarge(Exception):
    pass


class UploadSizeLimitMiddleware:
    """Answer 413 when a ``POST`` to *path* carries too large a body.

    A declared ``Content-Length`` over the limit is refused without reading
    anything.  Bodies without one (chunked transfer) are counted as they are
    received and cut off once they pass the limit.  The exact per-file
    ceiling is enforced again while the file is copied to disk.
    """

    def __init__(self, app, path: str, max_bytes: int):
        self.app = app
        self.path = path
        self.max_body = max_bytes + MULTIPART_ALLOWANCE
        self.max_bytes = max_bytes

    def _applies(self, scope) -> bool:
        if scope["type"] != "http" or scope["method"] != "POST":
            return False
        path = scope.get("path", "")
        root_path = scope.get("root_path", "")
        return path == self.path or (bool(root_path) and path == root_path + self.path)

    def _too_large(self) -> JSONResponse:
        return JSONResponse(
            status_code=413,
            content={
                "success": False,
                "message": f"File too large. Maximum size is {self.max_bytes} bytes.",
            },
        )

    async def __call__(self, scope, receive, send):
        if not self._applies(scope):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        declared = headers.get(b"content-length", b"").decode("latin-1")
        if declared.isdigit() and int(declared) > self.max_body:
            logger.warning(f"Rejected {declared}-byte upload before reading the body")
            await self._too_large()(scope, receive, send)
            return

        received = 0
        response_started = False

        async def counting_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body:
                    raise _BodyTooLarge
            return message

        async def tracking_send(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _BodyTooLarge:
            logger.warning(f"Rejected upload body after {received} bytes")
            if response_started:
                raise
            await self._too_large()(scope, receive, send)
