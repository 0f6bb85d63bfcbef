"""Tests for photodrop.core.config — configuration management.

Tests cover:
- Default values for all configuration fields.
- Environment variable overrides via the PHOTODROP_ prefix and bare aliases.
- Automatic directory creation on initialisation.
- The serverless configuration.
- Pydantic validation constraints.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from photodrop.core.config import (
    DEFAULT_MAX_UPLOAD_BYTES,
    PhotodropConfig,
    serverless_config,
)


def _config(temp_dir: Path, **overrides) -> PhotodropConfig:
    return PhotodropConfig(
        uploads_dir=temp_dir / "uploads",
        db_path=temp_dir / "db.sqlite",
        _env_file=None,
        **overrides,
    )


class TestConfigDefaults:
    """Verify that PhotodropConfig provides sensible defaults."""

    def test_default_port(self, temp_dir):
        """Default server port should be 5000."""
        assert _config(temp_dir).server_port == 5000

    def test_default_host(self, temp_dir):
        """Default bind address should be all interfaces."""
        assert _config(temp_dir).server_host == "0.0.0.0"

    def test_default_cors_is_wildcard(self, temp_dir):
        """CORS should default to allowing every origin."""
        cfg = _config(temp_dir)
        assert cfg.frontend_url == "*"
        assert cfg.allows_any_origin is True

    def test_default_upload_limit(self, temp_dir):
        """The upload ceiling should default to 15 MiB."""
        assert _config(temp_dir).max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES == 15 * 1024 * 1024


class TestConfigEnvironment:
    """Verify environment variable overrides."""

    def test_prefixed_port(self, monkeypatch, temp_dir):
        """PHOTODROP_SERVER_PORT should set the port."""
        monkeypatch.setenv("PHOTODROP_SERVER_PORT", "8080")
        assert _config(temp_dir).server_port == 8080

    def test_bare_port(self, monkeypatch, temp_dir):
        """PORT should set the port when the prefixed variable is absent."""
        monkeypatch.setenv("PORT", "9090")
        assert _config(temp_dir).server_port == 9090

    def test_prefixed_port_wins(self, monkeypatch, temp_dir):
        """The prefixed variable takes precedence over PORT."""
        monkeypatch.setenv("PORT", "9090")
        monkeypatch.setenv("PHOTODROP_SERVER_PORT", "8080")
        assert _config(temp_dir).server_port == 8080

    def test_frontend_url(self, monkeypatch, temp_dir):
        """FRONTEND_URL should restrict CORS to one origin."""
        monkeypatch.setenv("FRONTEND_URL", "https://gallery.example")
        cfg = _config(temp_dir)
        assert cfg.frontend_url == "https://gallery.example"
        assert cfg.allows_any_origin is False

    def test_upload_limit(self, monkeypatch, temp_dir):
        """PHOTODROP_MAX_UPLOAD_BYTES should set the ceiling."""
        monkeypatch.setenv("PHOTODROP_MAX_UPLOAD_BYTES", "2048")
        assert _config(temp_dir).max_upload_bytes == 2048


class TestConfigDirectoryCreation:
    """Verify that PhotodropConfig creates required directories."""

    def test_uploads_dir_created(self, temp_dir):
        """The uploads directory should exist after construction."""
        cfg = _config(temp_dir)
        assert cfg.uploads_dir.is_dir()

    def test_db_parent_created(self, temp_dir):
        """The database's parent directory should exist after construction."""
        cfg = PhotodropConfig(
            uploads_dir=temp_dir / "uploads",
            db_path=temp_dir / "nested" / "data" / "db.sqlite",
            _env_file=None,
        )
        assert cfg.db_path.parent.is_dir()


class TestServerlessConfig:
    """Verify the serverless configuration."""

    def test_paths_under_base_dir(self, temp_dir):
        """Storage should be relocated under the given root."""
        cfg = serverless_config(temp_dir)
        assert cfg.uploads_dir == temp_dir / "uploads"
        assert cfg.db_path == temp_dir / "db.sqlite"

    def test_cors_open(self, monkeypatch, temp_dir):
        """CORS is open even when FRONTEND_URL is set."""
        monkeypatch.setenv("FRONTEND_URL", "https://gallery.example")
        assert serverless_config(temp_dir).allows_any_origin is True


class TestConfigValidation:
    """Verify Pydantic validation constraints."""

    def test_port_out_of_range(self, temp_dir):
        """Ports above 65535 should be rejected."""
        with pytest.raises(ValidationError):
            _config(temp_dir, server_port=70000)

    def test_zero_upload_limit(self, temp_dir):
        """The upload ceiling must be positive."""
        with pytest.raises(ValidationError):
            _config(temp_dir, max_upload_bytes=0)
