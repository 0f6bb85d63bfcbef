"""Photodrop — FastAPI Application.

This module builds the FastAPI application, defines its routes, and provides
the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is intentionally small:

- **Configuration** is a :class:`~photodrop.core.config.PhotodropConfig`
  passed to :func:`create_app`; nothing is read from module globals, so
  several isolated app instances can coexist.
- **File intake** is performed by :class:`~photodrop.core.file_intake.FileIntake`,
  which streams the ``image`` field of a multipart form to the uploads
  directory under a generated name.
- **Entry persistence** uses a single SQLite table managed by
  :class:`~photodrop.core.entry_store.EntryStore`.
- **Uploaded images** are served by FastAPI's ``StaticFiles`` at
  ``/uploads/...``.

Endpoints
---------
========  ======================  ==========================================
Method    Path                    Purpose
========  ======================  ==========================================
POST      ``/upload``             Store an image and its details
GET       ``/gallery``            All entries, newest first
GET       ``/uploads/{name}``     Raw uploaded file
GET       ``/health``             Liveness probe
========  ======================  ==========================================

Usage
-----
CLI (installed entry point)::

    photodrop

Direct invocation::

    python -m photodrop.api.main
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from photodrop import __version__
from photodrop.api.errors import ApiError, register_error_handlers
from photodrop.api.middleware import UploadSizeLimitMiddleware
from photodrop.api.models import EntryOut, HealthResponse, UploadResponse
from photodrop.core.config import PhotodropConfig
from photodrop.core.details import Details, from_form, parse_details, serialize_details
from photodrop.core.entry_store import EntryStore
from photodrop.core.file_intake import (
    FILE_FIELD,
    FileIntake,
    UploadRejectedError,
    UploadTooLargeError,
)

logger = logging.getLogger(__name__)

#: Headers the serverless deployment allows on cross-origin requests.
SERVERLESS_ALLOW_HEADERS = ["Origin", "X-Requested-With", "Content-Type", "Accept"]

# ---------------------------------------------------------------------------
# Dependencies: components live on ``app.state``.
# ---------------------------------------------------------------------------


def get_store(request: Request) -> EntryStore:
    """Get the entry store from app state."""
    store: EntryStore = request.app.state.store
    return store


def get_intake(request: Request) -> FileIntake:
    """Get the file intake from app state."""
    intake: FileIntake = request.app.state.intake
    return intake


def file_url(request: Request, filename: str | None) -> str:
    """Absolute URL under which the static mount serves *filename*.

    A row without a filename still gets a URL (ending in ``null``) so one
    bad row cannot break a listing.
    """
    return str(request.url_for("uploads", path="null" if filename is None else filename))


def resolve_details(fields: dict[str, str]) -> Details:
    """Pick the details for an upload from its scalar form fields.

    A non-empty ``details`` field wins and is parsed as JSON, falling back to
    the raw string.  Without it, every other field is collected into a
    structured document.
    """
    raw = fields.get("details")
    if raw:
        return parse_details(raw)
    return from_form(fields, exclude=FILE_FIELD)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


def _register_routes(app: FastAPI) -> None:
    @app.post("/upload", response_model=UploadResponse)
    async def upload(
        request: Request,
        store: EntryStore = Depends(get_store),
        intake: FileIntake = Depends(get_intake),
    ) -> UploadResponse:
        """Store one image and its details.

        Expects ``multipart/form-data`` with the file in field ``image``.
        Details come from an optional ``details`` field (JSON, or any text) or,
        when that is absent, from all other scalar fields.

        Returns:
            ``{"success": true, "entry": {...}}`` with the stored entry.

        Raises:
            ApiError: 400 when no file was sent or unexpected files were
                sent, 413 when the file is too large, 500 when the insert
                fails.
        """
        async with request.form() as form:
            try:
                stored = await intake.accept(form)
            except UploadRejectedError as exc:
                raise ApiError(400, str(exc)) from exc
            except UploadTooLargeError as exc:
                raise ApiError(413, str(exc)) from exc

            fields = {key: value for key, value in form.items() if isinstance(value, str)}

        if stored is None:
            raise ApiError(400, f'No file uploaded. Use field name "{FILE_FIELD}".')

        details = resolve_details(fields)
        try:
            entry = await run_in_threadpool(
                store.insert,
                stored.filename,
                stored.originalname,
                serialize_details(details),
            )
        except sqlite3.Error as exc:
            logger.exception(f"Insert failed for {stored.filename}")
            raise ApiError(500, "DB insert error", str(exc)) from exc

        return UploadResponse(entry=EntryOut.from_entry(entry, file_url(request, entry.filename)))

    @app.get("/gallery", response_model=list[EntryOut])
    async def gallery(
        request: Request,
        store: EntryStore = Depends(get_store),
    ) -> list[EntryOut]:
        """Return every entry, newest first.

        Each row's details are parsed on their own; a row whose details are
        not JSON is returned with the raw string.
        """
        try:
            entries = await run_in_threadpool(store.list_entries)
        except sqlite3.Error as exc:
            logger.exception("Gallery read failed")
            raise ApiError(500, "DB error", str(exc)) from exc

        return [EntryOut.from_entry(entry, file_url(request, entry.filename)) for entry in entries]

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Liveness probe with the server time in epoch milliseconds."""
        return HealthResponse(ts=int(time.time() * 1000))


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(config: PhotodropConfig | None = None, *, serverless: bool = False) -> FastAPI:
    """Build a Photodrop application.

    Args:
        config: Settings for this instance.  Defaults to one loaded from the
            environment.
        serverless: Apply the serverless CORS policy (every origin, a fixed
            header allow-list) instead of the ``frontend_url`` policy.

    Returns:
        The configured FastAPI application.
    """
    if config is None:
        config = PhotodropConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            f"Photodrop ready: uploads={config.uploads_dir} db={config.db_path} "
            f"(CORS FRONTEND_URL={config.frontend_url})"
        )
        yield

    app = FastAPI(
        title="Photodrop",
        description="Image upload and gallery API.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store = EntryStore(config.db_path)
    app.state.intake = FileIntake(config.uploads_dir, config.max_upload_bytes)

    app.add_middleware(
        UploadSizeLimitMiddleware,
        path="/upload",
        max_bytes=config.max_upload_bytes,
    )

    # Added last so it wraps everything, including early 413 responses.
    if serverless:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=SERVERLESS_ALLOW_HEADERS,
        )
    elif config.allows_any_origin:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[config.frontend_url],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_error_handlers(app)
    _register_routes(app)

    # Serve uploaded files directly at ``/uploads/...``; no directory listing.
    app.mount("/uploads", StaticFiles(directory=str(config.uploads_dir)), name="uploads")

    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI entry point."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :class:`~photodrop.core.config.PhotodropConfig`
    (``PHOTODROP_SERVER_HOST`` and ``PHOTODROP_SERVER_PORT``/``PORT``).
    Defaults to ``0.0.0.0:5000``.

    This function is registered as the ``photodrop`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    config = PhotodropConfig()
    configure_logging(config.log_level)
    logger.info(f"Server running: http://localhost:{config.server_port}")

    uvicorn.run(
        create_app(config),
        host=config.server_host,
        port=config.server_port,
    )


if __name__ == "__main__":
    main()
