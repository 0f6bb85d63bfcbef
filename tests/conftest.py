"""Shared pytest fixtures for Photodrop tests."""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from photodrop.api.main import create_app
from photodrop.core.config import PhotodropConfig
from photodrop.core.entry_store import EntryStore

# Smallest valid PNG (1x1 transparent pixel).
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5f0000000049454e44ae426082"
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment variables out of configuration under test."""
    for name in (
        "PORT",
        "FRONTEND_URL",
        "PHOTODROP_SERVER_PORT",
        "PHOTODROP_FRONTEND_URL",
        "PHOTODROP_UPLOADS_DIR",
        "PHOTODROP_DB_PATH",
        "PHOTODROP_MAX_UPLOAD_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> PhotodropConfig:
    """Create a test configuration with temporary storage.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        PhotodropConfig instance for testing
    """
    return PhotodropConfig(
        uploads_dir=temp_dir / "uploads",
        db_path=temp_dir / "db.sqlite",
        _env_file=None,
    )


@pytest.fixture
def small_config(temp_dir: Path) -> PhotodropConfig:
    """Configuration with a 1 KiB upload ceiling."""
    return PhotodropConfig(
        uploads_dir=temp_dir / "uploads",
        db_path=temp_dir / "db.sqlite",
        max_upload_bytes=1024,
        _env_file=None,
    )


@pytest.fixture
def entry_store(temp_dir: Path) -> EntryStore:
    """Create an empty entry store in the temporary directory."""
    return EntryStore(temp_dir / "entries.sqlite")


@pytest.fixture
def test_client(test_config: PhotodropConfig) -> Generator[TestClient, None, None]:
    """TestClient for an isolated application instance."""
    with TestClient(create_app(test_config)) as client:
        yield client


@pytest.fixture
def small_client(small_config: PhotodropConfig) -> Generator[TestClient, None, None]:
    """TestClient for an application with a 1 KiB upload ceiling."""
    with TestClient(create_app(small_config)) as client:
        yield client


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes of a tiny valid PNG image."""
    return PNG_BYTES
