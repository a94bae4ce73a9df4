"""
Schema and migration management for SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("group_ping.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        with self._connect() as conn:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()
        conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        # Groups table. (name, guild_id) uniqueness is the authoritative guard
        # against two concurrent /create calls for the same name.
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS groups (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                guild_id INTEGER NOT NULL,
                creator_id INTEGER NOT NULL,
                last_used INTEGER NOT NULL,
                UNIQUE (name, guild_id)
            )
            """
        )

        # Group members. No ON DELETE CASCADE: members are removed before the group.
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS group_members (
                group_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                FOREIGN KEY (group_id) REFERENCES groups(id),
                PRIMARY KEY (group_id, user_id)
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        try:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
        except sqlite3.OperationalError:
            pass

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("add_group_lookup_indexes", self._migration_add_group_lookup_indexes),
            ("add_group_created_at", self._migration_add_group_created_at),
        ]

    # --- Migrations ---

    def _migration_add_group_lookup_indexes(self, cursor) -> None:
        """Indexes for per-guild listings and per-user membership lookups."""
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_groups_guild_last_used ON groups(guild_id, last_used)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_group_members_user ON group_members(user_id)"
        )

    def _migration_add_group_created_at(self, cursor) -> None:
        """Track creation time separately from last_used (informational only)."""
        self._add_column_if_not_exists(cursor, "groups", "created_at", "TIMESTAMP")
