"""
SQLite persistent store implementation for datastore.

Provides durable, file-based storage for evicted and flushed cache entries.
"""

import logging
import re
import sqlite3
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from datastore.exceptions import LoadError, SaveError, StoreUnavailableError, ValidationError
from datastore.persistence.base import PersistentStore

# Configure logging
logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

class SQLitePersistentStore(PersistentStore):
    """
    SQLite-based persistent store.

    Features:
    - Persistent storage in a single SQLite file
    - Automatic table creation
    - Parameterized upserts (INSERT OR REPLACE)
    - Transactional batch flush

    Args:
        db_path: Path to SQLite database file (':memory:' for a throwaway database)
        table_name: Name of the table holding the key/value pairs

    Raises:
        ValidationError: If ``table_name`` is not a plain SQL identifier.
        StoreUnavailableError: If the database cannot be opened or the table
            cannot be created.
    """

    def __init__(
        self,
        db_path: Union[str, Path] = "DataStore.db",
        table_name: str = "data",
    ):
        if not _IDENTIFIER.match(table_name):
            raise ValidationError(f"Invalid table name: {table_name!r}")
        self.db_path = str(db_path)
        self.table_name = table_name
        self._closed = False

        try:
            self._conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Failed to open database: {self.db_path}", original_exception=e) from e

        try:
            self._initialize_db()
        except sqlite3.Error as e:
            self._conn.close()
            raise StoreUnavailableError(
                f"Failed to create table '{self.table_name}' in {self.db_path}", original_exception=e
            ) from e

        logger.debug("Opened SQLite store", extra={"db_path": self.db_path, "table_name": self.table_name})

    def _initialize_db(self) -> None:
        """Create the key/value table if it doesn't exist."""
        with self._conn:
            self._conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {self.table_name} (
                key TEXT PRIMARY KEY,
                value TEXT
            )
            """)

    def load(self, key: str) -> Optional[str]:
        """Read the value stored for ``key``, or None if there is none."""
        if self._closed:
            raise LoadError("SQLite store is closed")

        try:
            cursor = self._conn.execute(
                f"SELECT value FROM {self.table_name} WHERE key = ? LIMIT 1",
                (key,)
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"SQLite error loading key '{key}': {e}")
            raise LoadError(f"Failed to load key '{key}' from SQLite store", original_exception=e) from e

        if row is None:
            return None
        return row[0]

    def save(self, key: str, value: str) -> bool:
        """Insert or replace the value stored for ``key``."""
        if self._closed:
            raise SaveError("SQLite store is closed")

        try:
            with self._conn:
                self._conn.execute(
                    f"INSERT OR REPLACE INTO {self.table_name} (key, value) VALUES (?, ?)",
                    (key, value)
                )
        except sqlite3.Error as e:
            logger.error(f"SQLite error saving key '{key}': {e}")
            raise SaveError(f"Failed to save key '{key}' to SQLite store", original_exception=e) from e
        return True

    def flush_batch(self, entries: Iterable[Tuple[str, str]]) -> bool:
        """
        Write all entries in a single transaction.

        Either every entry is committed or, on error, none of them are.
        """
        if self._closed:
            raise SaveError("SQLite store is closed")

        rows = list(entries)
        if not rows:
            return True

        try:
            with self._conn:
                self._conn.executemany(
                    f"INSERT OR REPLACE INTO {self.table_name} (key, value) VALUES (?, ?)",
                    rows
                )
        except sqlite3.Error as e:
            logger.error(f"SQLite error flushing {len(rows)} entries: {e}")
            raise SaveError(f"Failed to flush {len(rows)} entries to SQLite store", original_exception=e) from e
        return True

    def __len__(self) -> int:
        if self._closed:
            raise LoadError("SQLite store is closed")
        try:
            return self._conn.execute(f"SELECT COUNT(*) FROM {self.table_name}").fetchone()[0] or 0
        except sqlite3.Error as e:
            raise LoadError("Failed to count SQLite store rows", original_exception=e) from e

    def close(self) -> None:
        """Close the database connection."""
        if self._closed:
            return
        self._closed = True
        try:
            self._conn.close()
        except sqlite3.Error as e:
            logger.error(f"Error closing SQLite connection: {e}")
