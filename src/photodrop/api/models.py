"""Pydantic response models for the Photodrop API.

FastAPI uses these for response serialisation and OpenAPI documentation.

Models
------
EntryOut
    One gallery entry as returned by ``POST /upload`` and ``GET /gallery``.
UploadResponse
    Envelope returned by a successful ``POST /upload``.
HealthResponse
    Payload of ``GET /health``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from photodrop.core.details import details_value
from photodrop.core.entry_store import Entry


class EntryOut(BaseModel):
    """A stored entry with its public file URL.

    Attributes:
        id: Store-assigned identifier.
        filename: Generated on-disk file name.
        originalname: Client-supplied file name.
        details: Structured details or the raw string the client sent.
        file_url: Absolute URL of the file (serialised as ``fileUrl``).
        created_at: Store-assigned ISO-8601 UTC timestamp.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    filename: str | None
    originalname: str | None
    details: Any = None
    file_url: str = Field(..., alias="fileUrl")
    created_at: str

    @classmethod
    def from_entry(cls, entry: Entry, file_url: str) -> EntryOut:
        return cls(
            id=entry.id,
            filename=entry.filename,
            originalname=entry.originalname,
            details=details_value(entry.details),
            file_url=file_url,
            created_at=entry.created_at,
        )


class UploadResponse(BaseModel):
    """Response body for a successful ``POST /upload``."""

    success: bool = True
    entry: EntryOut


class HealthResponse(BaseModel):
    """Response body for ``GET /health``.

    Attributes:
        ok: Always ``True``.
        ts: Server time in milliseconds since the epoch.
    """

    ok: bool = True
    ts: int
