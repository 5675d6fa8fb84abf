"""SQLite storage adapter.

Implements the core TipStorePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from typing import Sequence


class SQLiteTipStore:
    """Thin SQLite wrapper that satisfies the TipStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - tip_state: the tip window front to back, so a restart keeps fetching
          incrementally instead of starting broad
        """

        with self._connect() as conn:
            # Fields:
            # - position: 0 for the cursor, increasing towards older posts
            # - post_name: reddit fullname of the post (t3_...)
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tip_state (
                    position INTEGER PRIMARY KEY,
                    post_name TEXT NOT NULL
                )
                """
            )

    def load_tip(self) -> list[str]:
        """Return the stored tip front to back, or an empty list."""

        with self._connect() as conn:
            rows = conn.execute("SELECT post_name FROM tip_state ORDER BY position").fetchall()
        return [row["post_name"] for row in rows if row["post_name"]]

    def save_tip(self, names: Sequence[str]) -> None:
        """Replace the stored tip in a single transaction."""

        with self._connect() as conn:
            conn.execute("DELETE FROM tip_state")
            conn.executemany(
                "INSERT INTO tip_state (position, post_name) VALUES (?, ?)",
                [(position, name) for position, name in enumerate(names) if name],
            )
