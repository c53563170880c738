"""SQLite access for the local profile and activity store."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from healthtrack.db.schema import TABLE_NAMES, get_schema_sql


class DatabaseConnection:
    """Opens short-lived connections to one healthtrack database file."""

    def __init__(self, db_path: Path):
        """
        Args:
            db_path: SQLite file; parent directories are created as needed
        """
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success and rolls back on error.

        Rows come back as ``sqlite3.Row``. Foreign keys are enforced, so log
        entries must reference an existing profile.

        Example:
            with db.get_connection() as conn:
                UserQueries.get_user(conn, "default_user")
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize_schema(self) -> None:
        """Create missing tables and indexes."""
        with self.get_connection() as conn:
            conn.executescript(get_schema_sql())

    def missing_tables(self) -> list[str]:
        """Names of healthtrack tables not present in the file."""
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            ).fetchall()
        present = {row["name"] for row in rows}
        return [name for name in TABLE_NAMES if name not in present]


# Shared instance for the CLI; library code takes a DatabaseConnection explicitly
_db: Optional[DatabaseConnection] = None


def get_db() -> DatabaseConnection:
    """Shared connection manager, built from settings on first use."""
    global _db
    if _db is None:
        from healthtrack.config import get_settings

        _db = DatabaseConnection(get_settings().database.path)
    return _db


def set_db(db: Optional[DatabaseConnection]) -> None:
    """Replace the shared connection manager; None resets it."""
    global _db
    _db = db
