"""
Versioned cache for the raw rules text.

The text lives under a fixed key and its version tag under "<key>_ver" in a
small sqlite key/value table, so a cached copy survives process restarts.
Caching is an optimization only: read problems count as a miss and write
problems are reported, never raised.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from ..config import CACHE_DB_PATH, CACHE_KEY
from ..error_handling import WriteOutcome, best_effort, handle_errors
from .models import create_cache_database

logger = logging.getLogger(__name__)


class CacheStore:
    """
    Raw rules text plus the version it belongs to.
    """

    def __init__(self, db_path: Path = CACHE_DB_PATH, key: str = CACHE_KEY,
                 validator=None):
        """
        Initialize the cache store.

        Args:
            db_path: Path to the sqlite file
            key: Storage key for the text; the version lives under "<key>_ver"
            validator: Validator a cached payload must still pass
        """
        self.db_path = Path(db_path)
        self.key = key
        self.version_key = f"{key}_ver"
        if validator is None:
            from ..rulebooks.handlers.validation import ContentValidator
            validator = ContentValidator()
        self.validator = validator

    def _connect(self) -> sqlite3.Connection:
        if not self.db_path.exists():
            logger.info(f"Cache database not found at {self.db_path}, creating it...")
        create_cache_database(self.db_path)
        return sqlite3.connect(str(self.db_path))

    @handle_errors(default_return=(None, None))
    def _read(self):
        conn = self._connect()
        try:
            rows = dict(conn.execute(
                "SELECT key, value FROM kv_store WHERE key IN (?, ?)",
                (self.key, self.version_key),
            ).fetchall())
        finally:
            conn.close()
        return rows.get(self.key), rows.get(self.version_key)

    def get(self, version: str) -> Optional[str]:
        """
        Return the cached text if it belongs to version and still looks valid.

        Anything else (missing, other version, corrupt) is evicted.

        Args:
            version: Expected version tag

        Returns:
            Cached text or None
        """
        text, stored_version = self._read()
        if text is None and stored_version is None:
            logger.info("Rules cache is empty")
            return None

        if stored_version != version:
            logger.info(f"Cached rules version {stored_version!r} does not match {version!r}; evicting")
            self.clear()
            return None

        if not self.validator.is_valid(text):
            logger.warning("Cached rules text failed validation; evicting")
            self.clear()
            return None

        logger.info(f"Using cached rules text (version {version}, {len(text)} characters)")
        return text

    def _write(self, text: str, version: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.executemany(
                    "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)",
                    [(self.key, text), (self.version_key, version)],
                )
        finally:
            conn.close()

    def put(self, text: str, version: str) -> WriteOutcome:
        """
        Store text for version, replacing whatever was there.

        Args:
            text: Raw rules text
            version: Version tag it corresponds to

        Returns:
            WriteOutcome; a failed write is logged and otherwise ignored
        """
        outcome = best_effort(self._write, text, version, error_msg="Could not write rules cache")
        if outcome.ok:
            logger.info(f"Cached rules text for version {version} ({len(text)} characters)")
        return outcome

    def clear(self) -> WriteOutcome:
        """Remove the cached text and its version tag."""
        def _delete():
            conn = self._connect()
            try:
                with conn:
                    conn.execute("DELETE FROM kv_store WHERE key IN (?, ?)", (self.key, self.version_key))
            finally:
                conn.close()

        return best_effort(_delete, error_msg="Could not clear rules cache")
