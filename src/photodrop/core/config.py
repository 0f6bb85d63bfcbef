"""Configuration management for Photodrop.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PHOTODROP_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PHOTODROP_* prefix)
2. .env file in the project root
3. Default values defined in PhotodropConfig

The listening port and the allowed cross-origin caller additionally honour the
bare ``PORT`` and ``FRONTEND_URL`` variables that most hosting platforms set.

Example .env file:
    PHOTODROP_SERVER_PORT=5000
    PHOTODROP_FRONTEND_URL=https://gallery.example.netlify.app
    PHOTODROP_UPLOADS_DIR=uploads
    PHOTODROP_DB_PATH=db.sqlite

Usage Example
-------------
    from photodrop.core.config import PhotodropConfig
    from photodrop.api.main import create_app

    app = create_app(PhotodropConfig(uploads_dir="/srv/uploads"))

Unlike a module-level singleton, each :class:`PhotodropConfig` is passed
explicitly into the components that need it, so several isolated application
instances (one per test, say) can run side by side.

Directory Management
--------------------
The configuration creates required directories on initialization:
- uploads_dir: Where uploaded images are written
- the parent directory of db_path: Where the SQLite file lives
"""

import tempfile
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

#: 15 MiB, the largest single image accepted by ``POST /upload``.
DEFAULT_MAX_UPLOAD_BYTES = 15 * 1024 * 1024


class PhotodropConfig(BaseSettings):
    """Main configuration for Photodrop.

    Attributes
    ----------
    Server Settings:
        server_host : str
            Server bind address (0.0.0.0 for all interfaces)
        server_port : int
            Server port (1-65535)
        frontend_url : str
            Allowed cross-origin caller; ``"*"`` allows every origin

    Storage:
        uploads_dir : Path
            Directory that receives uploaded images and is served at /uploads
        db_path : Path
            SQLite database file holding the entries table
        max_upload_bytes : int
            Largest accepted image size in bytes

    Logging:
        log_level : str
            Root log level used by the CLI entry point

    Examples
    --------
        >>> cfg = PhotodropConfig(uploads_dir="/tmp/up", db_path="/tmp/db.sqlite")
        >>> cfg.max_upload_bytes
        15728640
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PHOTODROP_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for all interfaces)",
    )
    server_port: int = Field(
        default=5000,
        description="Server port",
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PHOTODROP_SERVER_PORT", "PORT"),
    )
    frontend_url: str = Field(
        default="*",
        description="Allowed CORS origin; '*' allows all origins",
        validation_alias=AliasChoices("PHOTODROP_FRONTEND_URL", "FRONTEND_URL"),
    )

    # Storage
    uploads_dir: Path = Field(
        default=Path("uploads"),
        description="Directory to store uploaded images",
    )
    db_path: Path = Field(
        default=Path("db.sqlite"),
        description="SQLite database file",
    )
    max_upload_bytes: int = Field(
        default=DEFAULT_MAX_UPLOAD_BYTES,
        description="Maximum accepted image size in bytes",
        ge=1,
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for the CLI entry point",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create required directories.

        Args:
            **kwargs: Configuration overrides (typically from environment variables)
        """
        super().__init__(**kwargs)

        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def allows_any_origin(self) -> bool:
        """Whether CORS is open to every origin."""
        return self.frontend_url == "*"


def serverless_config(base_dir: Path | None = None) -> PhotodropConfig:
    """Build the configuration used by the serverless deployment.

    Function runtimes only offer a writable temp directory, so uploads and the
    database are relocated there and CORS is opened to every origin.  Nothing
    stored this way survives a cold start.

    Args:
        base_dir: Root for the ephemeral storage.  Defaults to the system temp
            directory (``/tmp`` on Lambda).

    Returns:
        A :class:`PhotodropConfig` rooted in *base_dir*.
    """
    root = Path(base_dir) if base_dir is not None else Path(tempfile.gettempdir())
    return PhotodropConfig(
        uploads_dir=root / "uploads",
        db_path=root / "db.sqlite",
        frontend_url="*",
        _env_file=None,
    )
