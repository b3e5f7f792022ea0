"""
SQLite key-value operations for persisted calendar state.
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from core.config import DB_PATH


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get a database connection."""
    return sqlite3.connect(db_path or DB_PATH)


def create_schema(conn: sqlite3.Connection):
    """Create the key-value table if it doesn't exist."""
    cursor = conn.cursor()
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """)
    conn.commit()


def read_value(conn: sqlite3.Connection, key: str) -> str | None:
    """Return the stored value for key, or None."""
    cursor = conn.cursor()
    cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
    row = cursor.fetchone()
    return row[0] if row else None


def write_value(conn: sqlite3.Connection, key: str, value: str):
    """Insert or replace the value stored under key."""
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
        """,
        (key, value, datetime.now(timezone.utc).isoformat()),
    )
    conn.commit()


def delete_value(conn: sqlite3.Connection, key: str):
    cursor = conn.cursor()
    cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
    conn.commit()
