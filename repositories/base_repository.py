"""
Base repository: SQLite connection and transaction scopes for group storage.
"""

import logging
import sqlite3
from abc import ABC
from contextlib import contextmanager

logger = logging.getLogger("group_ping.repositories")


class BaseRepository(ABC):
    """
    Opens one short-lived SQLite connection per operation.

    The schema must already exist: ServiceContainer runs SchemaManager once
    at startup before any repository is built. Every connection enforces the
    group_members -> groups foreign key and waits on a busy database instead
    of failing, since command handlers run on several worker threads.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        # Foreign keys are per-connection in SQLite and off by default
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    @contextmanager
    def connection(self):
        """
        Scope for single-statement reads and writes.

        Commits when the block exits normally, rolls back and re-raises on
        any exception, and closes the connection either way.
        """
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def atomic_transaction(self):
        """
        Scope for multi-statement group writes, holding the write lock throughout.

        BEGIN IMMEDIATE takes the lock before the first statement, so steps
        such as "insert group, insert creator" or "remove member, count the
        rest, drop the empty group" never interleave with another writer.
        """
        conn = self.get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except Exception:
            logger.debug(f"Rolling back group transaction on {self.db_path}")
            conn.rollback()
            raise
        finally:
            conn.close()
