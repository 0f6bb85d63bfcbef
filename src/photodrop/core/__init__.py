"""Core components of Photodrop.

- **PhotodropConfig**: Configuration management using Pydantic Settings
- **Details**: Structured/raw metadata variant with explicit JSON conversion
- **FileIntake**: Streams the uploaded image to the uploads directory
- **EntryStore**: SQLite table of uploaded entries

Usage Example
-------------
    from photodrop.core import EntryStore, PhotodropConfig

    config = PhotodropConfig()
    store = EntryStore(config.db_path)
    for entry in store.list_entries():
        print(entry.id, entry.filename)
"""

from photodrop.core.config import PhotodropConfig, serverless_config
from photodrop.core.details import Details, Raw, Structured, parse_details, serialize_details
from photodrop.core.entry_store import Entry, EntryStore
from photodrop.core.file_intake import FileIntake, StoredFile

__all__ = [
    "Details",
    "Entry",
    "EntryStore",
    "FileIntake",
    "PhotodropConfig",
    "Raw",
    "StoredFile",
    "Structured",
    "parse_details",
    "serialize_details",
    "serverless_config",
]
