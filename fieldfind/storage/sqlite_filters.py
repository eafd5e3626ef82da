"""SQLite-backed saved filter store."""

import sqlite3
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Dict, Any

from ..contracts.filter_store import IFilterStore
from ..core.errors import FilterStoreError
from ..models.filters import SavedFilter


logger = logging.getLogger(__name__)


class SQLiteFilterStore(IFilterStore):
    """
    Saved filters in SQLite, one row per scope.

    The scope's filter list is stored as a JSON array and replaced on every
    write. `updated_at` records the last write for last-write-wins
    diagnostics across engine instances.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.database_path = Path(self.config.get("database", "data/filters.db"))
        self.conn: Optional[sqlite3.Connection] = None

    def _connect(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self.conn is None:
            if str(self.database_path) != ":memory:":
                self.database_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(self.database_path))
            self.conn.row_factory = sqlite3.Row
            self.initialize()

        return self.conn

    def initialize(self) -> None:
        """Create database schema."""
        conn = self.conn if self.conn is not None else self._connect()

        conn.execute("""
            CREATE TABLE IF NOT EXISTS saved_filters (
                scope_id TEXT PRIMARY KEY,
                filters TEXT NOT NULL,  -- JSON array of SavedFilter dicts
                filter_count INTEGER NOT NULL,
                updated_at DATETIME NOT NULL
            )
        """)
        conn.commit()

    def load_filters(self, scope_id: str) -> List[SavedFilter]:
        """Load all saved filters for a scope."""
        try:
            conn = self._connect()
            row = conn.execute(
                "SELECT filters FROM saved_filters WHERE scope_id = ?",
                (scope_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise FilterStoreError(f"Cannot read filters for scope {scope_id!r}: {e}") from e

        if row is None:
            return []

        try:
            return [SavedFilter.from_dict(item) for item in json.loads(row['filters'])]
        except (ValueError, KeyError, TypeError) as e:
            raise FilterStoreError(f"Corrupt filter data for scope {scope_id!r}: {e}") from e

    def persist_filters(self, scope_id: str, filters: List[SavedFilter]) -> bool:
        """Replace the scope's saved filters."""
        payload = json.dumps([saved.to_dict() for saved in filters])
        updated_at = datetime.now(timezone.utc).isoformat()

        try:
            conn = self._connect()
            conn.execute("""
                INSERT OR REPLACE INTO saved_filters (scope_id, filters, filter_count, updated_at)
                VALUES (?, ?, ?, ?)
            """, (scope_id, payload, len(filters), updated_at))
            conn.commit()
        except sqlite3.Error as e:
            logger.error("Failed to persist filters for scope %r: %s", scope_id, e)
            return False

        return True

    def get_statistics(self) -> dict:
        """
        Return storage statistics.

        Returns:
            Dict with keys: total_scopes, total_filters, size_mb
        """
        conn = self._connect()

        row = conn.execute("""
            SELECT COUNT(*) as scopes, COALESCE(SUM(filter_count), 0) as filters
            FROM saved_filters
        """).fetchone()

        size_mb = 0
        if str(self.database_path) != ":memory:" and self.database_path.exists():
            size_mb = self.database_path.stat().st_size / 1024 / 1024

        return {
            'total_scopes': row['scopes'],
            'total_filters': row['filters'],
            'size_mb': size_mb,
        }

    def close(self) -> None:
        """Close connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
