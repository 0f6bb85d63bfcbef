"""SQLite store for gallery entries."""

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from photodrop.core.details import Details, parse_details

logger = logging.getLogger(__name__)

_COLUMNS = "id, filename, originalname, details, created_at"


@dataclass(frozen=True)
class Entry:
    """One stored upload.

    Attributes:
        id: Store-assigned identifier.
        filename: Generated name of the file inside the uploads directory.
        originalname: File name supplied by the client.
        details: Parsed metadata.
        created_at: Store-assigned ISO-8601 UTC timestamp.
    """

    id: int
    filename: str | None
    originalname: str | None
    details: Details
    created_at: str


class EntryStore:
    """Append-only table of uploads backed by SQLite.

    Every operation opens its own connection, so one store can be shared by
    concurrent requests; SQLite serializes the writes.  Driver errors
    (:class:`sqlite3.Error`) are not caught here, the API layer reports them.
    """

    def __init__(self, db_path: Path):
        """Initialize the entry store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_db()
        logger.info(f"Connected to SQLite DB: {self.db_path}")

    def _initialize_db(self) -> None:
        """Create database schema if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            # Millisecond timestamps keep rows inserted within one second apart.
            conn.execute("""
                CREATE TABLE IF NOT EXISTS entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    filename TEXT,
                    originalname TEXT,
                    details TEXT,
                    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
                )
                """)
            conn.commit()

    @staticmethod
    def _row_to_entry(row: tuple) -> Entry:
        entry_id, filename, originalname, details, created_at = row
        return Entry(
            id=entry_id,
            filename=filename,
            originalname=originalname,
            details=parse_details(details),
            created_at=created_at,
        )

    def insert(self, filename: str, originalname: str, details: str) -> Entry:
        """Insert a new entry.

        Args:
            filename: Generated on-disk file name
            originalname: Client-supplied file name
            details: Serialized details text

        Returns:
            The stored entry, read back so ``created_at`` is the store's value

        Raises:
            sqlite3.Error: If the insert fails
        """
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                INSERT INTO entries (filename, originalname, details)
                VALUES (?, ?, ?)
                """,
                (filename, originalname, details),
            )
            entry_id = cursor.lastrowid
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM entries WHERE id = ?", (entry_id,)
            ).fetchone()

        logger.info(f"Stored entry {entry_id} for {filename}")
        return self._row_to_entry(row)

    def get(self, entry_id: int) -> Entry | None:
        """Fetch a single entry by id.

        Returns:
            The entry, or None if no such id exists
        """
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM entries WHERE id = ?", (entry_id,)
            ).fetchone()
        return self._row_to_entry(row) if row else None

    def list_entries(self) -> list[Entry]:
        """Get all entries, newest first.

        Rows sharing a timestamp are ordered by descending id.
        """
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM entries ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def count(self) -> int:
        """Get total number of stored entries."""
        with sqlite3.connect(self.db_path) as conn:
            result = conn.execute("SELECT COUNT(*) FROM entries").fetchone()
        return result[0] if result else 0
