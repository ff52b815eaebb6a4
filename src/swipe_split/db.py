"""SQLite database operations for SwipeSplit."""

import json
import logging
import sqlite3
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from .models import DecisionTag

logger = logging.getLogger(__name__)


class Database:
    """SQLite database manager."""

    def __init__(self, db_path: Path):
        """Initialize database connection."""
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self):
        """Initialize database schema."""
        cursor = self.conn.cursor()

        # Saved decisions, one snapshot per statement
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS decision_snapshots (
                statement_key TEXT PRIMARY KEY,
                snapshot TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        # Config table
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS config (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()

    # ========================================================================
    # Config operations
    # ========================================================================

    def get_config(self, key: str) -> str | None:
        """Get a config value by key."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM config WHERE key = ?", (key,))
        row = cursor.fetchone()
        return str(row["value"]) if row else None

    def set_config(self, key: str, value: str):
        """Set a config value."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO config (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, value, datetime.now().isoformat()),
        )
        self.conn.commit()

    def get_ratio(self) -> Decimal | None:
        """Get the last used split ratio."""
        value = self.get_config("split_ratio")
        if value is None:
            return None
        try:
            return Decimal(value)
        except InvalidOperation:
            logger.warning(f"Ignoring malformed saved ratio: {value!r}")
            return None

    def set_ratio(self, ratio: Decimal):
        """Remember the split ratio for the next session."""
        self.set_config("split_ratio", str(ratio))

    # ========================================================================
    # Decision snapshot operations
    # ========================================================================

    def get_decisions(self, statement_key: str) -> dict[str, str] | None:
        """
        Get the saved decision snapshot for a statement.

        Keys come back as strings (JSON object keys); DecisionStore.restore
        converts them.
        """
        cursor = self.conn.cursor()
        cursor.execute(
            "SELECT snapshot FROM decision_snapshots WHERE statement_key = ?",
            (statement_key,),
        )
        row = cursor.fetchone()
        if not row:
            return None

        try:
            snapshot = json.loads(row["snapshot"])
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable snapshot for {statement_key[:8]}...")
            return None

        if not isinstance(snapshot, dict):
            return None
        return snapshot

    def save_decisions(self, statement_key: str, snapshot: dict[int, DecisionTag]):
        """Save (replace) the decision snapshot for a statement."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO decision_snapshots (statement_key, snapshot, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(statement_key) DO UPDATE SET
                snapshot = excluded.snapshot,
                updated_at = excluded.updated_at
            """,
            (
                statement_key,
                json.dumps({str(k): v for k, v in sorted(snapshot.items())}),
                datetime.now().isoformat(),
            ),
        )
        self.conn.commit()

    def delete_decisions(self, statement_key: str) -> bool:
        """Delete saved decisions for a statement. Returns True if any existed."""
        cursor = self.conn.cursor()
        cursor.execute(
            "DELETE FROM decision_snapshots WHERE statement_key = ?",
            (statement_key,),
        )
        self.conn.commit()
        return cursor.rowcount > 0
