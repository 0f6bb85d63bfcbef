"""Photodrop - image upload and gallery service."""

__version__ = "0.1.0"

from photodrop.core.config import PhotodropConfig

__all__ = [
    "PhotodropConfig",
    "__version__",
]
