#!/usr/bin/env python3
"""Create the calendar SQLite3 database with the key-value storage table."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.database import create_schema, get_connection


def create_database():
    """Create the database and tables if they don't exist."""
    # Ensure directory exists
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(DB_PATH)
    try:
        create_schema(conn)
    finally:
        conn.close()
    print(f"Database created successfully at: {DB_PATH}")
    print("Set CALENDAR_STORAGE_BACKEND=sqlite to store events here.")


if __name__ == "__main__":
    create_database()
