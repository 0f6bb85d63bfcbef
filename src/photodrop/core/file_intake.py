"""File intake: accept the uploaded image and write it to the uploads directory.

The intake only ever looks at one form field, ``image``.  It generates a
collision-resistant name of the form ``{epoch-ms}-{random}{ext}`` where
``ext`` is the suffix of the client-supplied file name, and streams the
upload to disk in chunks so the size ceiling is enforced while copying.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path, PurePath

import aiofiles
import aiofiles.os
from starlette.datastructures import FormData, UploadFile

logger = logging.getLogger(__name__)

#: Name of the multipart field carrying the image.
FILE_FIELD = "image"

_CHUNK_SIZE = 1024 * 1024


class UploadRejectedError(Exception):
    """The multipart form carries files the intake does not accept."""


class UploadTooLargeError(Exception):
    """The uploaded file exceeds the configured size ceiling."""

    def __init__(self, limit: int):
        super().__init__(f"File too large. Maximum size is {limit} bytes.")
        self.limit = limit


@dataclass(frozen=True)
class StoredFile:
    """A file written by :class:`FileIntake`.

    Attributes:
        filename: Generated name inside the uploads directory.
        originalname: Name the client gave the file.
        path: Absolute location on disk.
        size: Number of bytes written.
    """

    filename: str
    originalname: str
    path: Path
    size: int


def original_extension(originalname: str) -> str:
    """Return the final suffix of *originalname*, or ``""`` if it has none.

    Leading dots do not start an extension, so dotfiles such as ``.bashrc``
    have none.  A trailing dot is kept as the extension ``"."``.
    """
    if not originalname:
        return ""
    stem = PurePath(originalname).name.lstrip(".")
    dot = stem.rfind(".")
    return stem[dot:] if dot != -1 else ""


def generate_filename(originalname: str) -> str:
    """Build a collision-resistant on-disk name that keeps the extension."""
    unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return unique + original_extension(originalname)


class FileIntake:
    """Write the ``image`` upload of a multipart form to a directory.

    Args:
        uploads_dir: Destination directory (created if missing).
        max_bytes: Largest accepted file size; a file of exactly this size
            is accepted.
    """

    def __init__(self, uploads_dir: Path, max_bytes: int):
        self.uploads_dir = Path(uploads_dir)
        self.max_bytes = max_bytes
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _select_upload(self, form: FormData) -> UploadFile | None:
        uploads: list[UploadFile] = []
        for key, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            if key != FILE_FIELD:
                raise UploadRejectedError(f'Unexpected file field "{key}".')
            uploads.append(value)

        if len(uploads) > 1:
            raise UploadRejectedError(f'Only one file may be sent in field "{FILE_FIELD}".')
        return uploads[0] if uploads else None

    async def accept(self, form: FormData) -> StoredFile | None:
        """Store the form's ``image`` file.

        Args:
            form: Parsed multipart form.

        Returns:
            The stored file, or ``None`` if the form has no ``image`` file.

        Raises:
            UploadRejectedError: More than one file, or a file under another
                field name.
            UploadTooLargeError: The file is larger than ``max_bytes``.  The
                partially written file is removed.
        """
        upload = self._select_upload(form)
        if upload is None:
            return None

        originalname = upload.filename or ""
        filename = generate_filename(originalname)
        path = self.uploads_dir / filename

        size = 0
        too_large = False
        async with aiofiles.open(path, "wb") as out:
            while True:
                chunk = await upload.read(_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    too_large = True
                    break
                await out.write(chunk)

        if too_large:
            await aiofiles.os.remove(path)
            logger.warning(f"Rejected {originalname!r}: larger than {self.max_bytes} bytes")
            raise UploadTooLargeError(self.max_bytes)

        logger.info(f"Stored upload {filename} ({size} bytes) from {originalname!r}")
        return StoredFile(filename=filename, originalname=originalname, path=path, size=size)
