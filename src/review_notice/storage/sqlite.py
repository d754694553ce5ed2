"""
SQLite storage for site options and user meta.

Both stores can share one database file; each creates its own table.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

from .base import StorageError

logger = logging.getLogger(__name__)


class _SqliteStore:
    """Shared connection and schema handling."""

    schema: str = ""

    def __init__(self, db_path: str = "/var/lib/review-notice/notices.db"):
        """
        Initialize store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

        logger.info(f"Initialized {type(self).__name__} at {self.db_path}")

    def _init_db(self) -> None:
        """Create database schema if it doesn't exist."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(self.schema)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot initialize {self.db_path}: {e}") from e

    def _fetch_value(self, query: str, params: tuple) -> Optional[Any]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                row = conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Read failed on {self.db_path}: {e}") from e

        if not row:
            return None
        return json.loads(row[0])

    def _write(self, query: str, params: tuple) -> None:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(query, params)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Write failed on {self.db_path}: {e}") from e


class SqliteSiteOptions(_SqliteStore):
    """
    Site-wide options in SQLite.

    Values are stored JSON-encoded.
    """

    schema = """
        CREATE TABLE IF NOT EXISTS site_options (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """

    def get(self, key: str) -> Optional[Any]:
        """
        Get option value.

        Args:
            key: Option key

        Returns:
            Decoded value or None if not set
        """
        return self._fetch_value("SELECT value FROM site_options WHERE key = ?", (key,))

    def set(self, key: str, value: Any) -> None:
        """
        Insert or replace option value.

        Args:
            key: Option key
            value: JSON-serializable value
        """
        self._write(
            "INSERT OR REPLACE INTO site_options (key, value) VALUES (?, ?)",
            (key, json.dumps(value)),
        )
        logger.debug(f"Saved site option: {key}")


class SqliteUserMeta(_SqliteStore):
    """Per-viewer meta values in SQLite."""

    schema = """
        CREATE TABLE IF NOT EXISTS user_meta (
            viewer_id TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT NOT NULL,
            PRIMARY KEY (viewer_id, key)
        )
    """

    def get(self, viewer_id: str, key: str) -> Optional[Any]:
        return self._fetch_value(
            "SELECT value FROM user_meta WHERE viewer_id = ? AND key = ?",
            (viewer_id, key),
        )

    def set(self, viewer_id: str, key: str, value: Any) -> None:
        self._write(
            "INSERT OR REPLACE INTO user_meta (viewer_id, key, value) VALUES (?, ?, ?)",
            (viewer_id, key, json.dumps(value)),
        )
        logger.debug(f"Saved user meta {key} for viewer {viewer_id}")
