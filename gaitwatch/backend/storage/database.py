"""
storage/database.py

SQLite connection and schema initialisation for the GaitWatch sample store.

Design decisions:
  - WAL journal mode so API reads never block sample ingestion.
  - check_same_thread=False: queries run in worker threads via
    asyncio.to_thread(); every statement goes through _lock.
  - busy_timeout=5000ms: instead of raising SQLITE_BUSY immediately, SQLite
    will spin-wait up to 5 seconds, allowing WAL readers to finish.
  - Timestamps are stored as REAL unix epoch seconds (UTC).
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
import time

logger = logging.getLogger(__name__)

_CURRENT_SCHEMA_VERSION = 1


class Database:
    """
    Thin wrapper around a sqlite3 connection.

    Usage:
        db = Database("data/samples.db")
        db.init_schema()
        # ... pass db to SampleRepository ...
        db.close()
    """

    def __init__(self, db_path: str = "data/samples.db") -> None:
        self.db_path = db_path
        if db_path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row  # rows behave like dicts
        self._lock = threading.Lock()
        self._configure()
        logger.info("Database opened — path=%r", db_path)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _configure(self) -> None:
        """Apply performance and safety PRAGMAs."""
        cur = self.conn.cursor()
        cur.execute("PRAGMA journal_mode=WAL")
        cur.execute("PRAGMA busy_timeout=5000")
        cur.execute("PRAGMA synchronous=NORMAL")  # safe with WAL
        self.conn.commit()

    # ------------------------------------------------------------------
    # Schema initialisation
    # ------------------------------------------------------------------

    def init_schema(self) -> None:
        """Create all tables and indexes if they don't already exist."""
        with self._lock:
            cur = self.conn.cursor()
            cur.executescript("""
                CREATE TABLE IF NOT EXISTS samples (
                    id          INTEGER PRIMARY KEY AUTOINCREMENT,
                    quantity    TEXT NOT NULL,
                    timestamp   REAL NOT NULL,
                    value       REAL NOT NULL,
                    created_at  REAL NOT NULL DEFAULT (strftime('%s', 'now'))
                );

                CREATE TABLE IF NOT EXISTS schema_version (
                    version    INTEGER PRIMARY KEY,
                    applied_at REAL NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_samples_quantity_timestamp
                    ON samples(quantity, timestamp);
            """)

            # Record schema version (ignore if already present)
            cur.execute(
                "INSERT OR IGNORE INTO schema_version (version, applied_at) VALUES (?, ?)",
                (_CURRENT_SCHEMA_VERSION, time.time()),
            )
            self.conn.commit()
        logger.info("Schema initialised (version=%d)", _CURRENT_SCHEMA_VERSION)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Flush and close the SQLite connection."""
        try:
            self.conn.commit()
            self.conn.close()
            logger.info("Database closed — path=%r", self.db_path)
        except sqlite3.Error as exc:
            logger.warning("Error closing database: %s", exc)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def execute(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute a single parameterized statement and return all rows."""
        with self._lock:
            return self.conn.execute(sql, params).fetchall()

    def executemany(self, sql: str, params_list: list) -> int:
        """Execute a statement against a list of parameter tuples and commit."""
        with self._lock:
            cur = self.conn.executemany(sql, params_list)
            self.conn.commit()
            return cur.rowcount
