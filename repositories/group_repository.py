"""
Repository for groups and group memberships.
"""

from repositories.base_repository import BaseRepository
from repositories.interfaces import IGroupRepository

_GROUP_COLUMNS = "g.id, g.name, g.guild_id, g.creator_id, g.last_used"


class GroupRepository(BaseRepository, IGroupRepository):
    """
    Raw CRUD for the groups and group_members tables.

    Methods raise sqlite3 errors unchanged; translating them into
    user-facing results is the registry's job.
    """

    def create_with_creator(
        self, name: str, guild_id: int, creator_id: int, last_used: int
    ) -> dict:
        """
        Insert a group and its creator's membership in one transaction.

        Raises:
            sqlite3.IntegrityError: if (name, guild_id) already exists
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO groups (name, guild_id, creator_id, last_used, created_at)
                VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (name, guild_id, creator_id, last_used),
            )
            group_id = cursor.lastrowid
            cursor.execute(
                "INSERT INTO group_members (group_id, user_id) VALUES (?, ?)",
                (group_id, creator_id),
            )
            return {
                "id": group_id,
                "name": name,
                "guild_id": guild_id,
                "creator_id": creator_id,
                "last_used": last_used,
            }

    def get_by_name(self, name: str, guild_id: int) -> dict | None:
        """Exact, case-sensitive lookup on (name, guild_id)."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_GROUP_COLUMNS} FROM groups g WHERE g.name = ? AND g.guild_id = ?",
                (name, guild_id),
            )
            row = cursor.fetchone()
            return dict(row) if row else None

    def get_by_id(self, group_id: int) -> dict | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_GROUP_COLUMNS} FROM groups g WHERE g.id = ?", (group_id,))
            row = cursor.fetchone()
            return dict(row) if row else None

    def get_guild_groups(self, guild_id: int) -> list[dict]:
        """All groups in a guild, least recently used first."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_GROUP_COLUMNS}
                FROM groups g
                WHERE g.guild_id = ?
                ORDER BY g.last_used ASC, g.id ASC
                """,
                (guild_id,),
            )
            return [dict(row) for row in cursor.fetchall()]

    def get_user_guild_groups(self, guild_id: int, user_id: int) -> list[dict]:
        """Groups in a guild the user belongs to, least recently used first."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_GROUP_COLUMNS}
                FROM groups g
                JOIN group_members m ON m.group_id = g.id
                WHERE g.guild_id = ? AND m.user_id = ?
                ORDER BY g.last_used ASC, g.id ASC
                """,
                (guild_id, user_id),
            )
            return [dict(row) for row in cursor.fetchall()]

    def update_last_used(self, group_id: int, last_used: int) -> bool:
        """Returns False if no group with that id exists."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE groups SET last_used = ? WHERE id = ?",
                (last_used, group_id),
            )
            return cursor.rowcount > 0

    def get_member_ids(self, group_id: int) -> list[int]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT user_id FROM group_members WHERE group_id = ? ORDER BY rowid",
                (group_id,),
            )
            return [row["user_id"] for row in cursor.fetchall()]

    def count_members(self, group_id: int) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT COUNT(*) AS cnt FROM group_members WHERE group_id = ?",
                (group_id,),
            )
            return cursor.fetchone()["cnt"]

    def add_member(self, group_id: int, user_id: int) -> bool:
        """
        Insert a membership. An existing (group_id, user_id) pair is left alone.

        Returns:
            True if a row was inserted, False if the user was already a member.

        Raises:
            sqlite3.IntegrityError: if the group does not exist (foreign key)
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO group_members (group_id, user_id)
                VALUES (?, ?)
                ON CONFLICT(group_id, user_id) DO NOTHING
                """,
                (group_id, user_id),
            )
            return cursor.rowcount > 0

    def is_member(self, group_id: int, user_id: int) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT 1 FROM group_members WHERE group_id = ? AND user_id = ? LIMIT 1",
                (group_id, user_id),
            )
            return cursor.fetchone() is not None

    def remove_member(self, group_id: int, user_id: int) -> bool:
        """Returns True if a membership row was deleted."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM group_members WHERE group_id = ? AND user_id = ?",
                (group_id, user_id),
            )
            return cursor.rowcount > 0

    def delete_group(self, group_id: int) -> int | None:
        """
        Delete a group's memberships, then the group, in one transaction.

        Returns:
            Number of membership rows removed, or None if the group did not
            exist (in which case nothing is changed).
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM groups WHERE id = ?", (group_id,))
            if cursor.fetchone() is None:
                return None
            cursor.execute("DELETE FROM group_members WHERE group_id = ?", (group_id,))
            removed = cursor.rowcount
            cursor.execute("DELETE FROM groups WHERE id = ?", (group_id,))
            return removed

    def remove_member_and_prune(self, group_id: int, user_id: int) -> tuple[bool, int, bool]:
        """
        Remove a membership and delete the group if nobody is left.

        Runs under one write-locked transaction so a concurrent join cannot
        land between the member count and the group delete.

        Returns:
            (removed, remaining_members, group_deleted)
        """
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM group_members WHERE group_id = ? AND user_id = ?",
                (group_id, user_id),
            )
            if cursor.rowcount == 0:
                cursor.execute(
                    "SELECT COUNT(*) AS cnt FROM group_members WHERE group_id = ?",
                    (group_id,),
                )
                return False, cursor.fetchone()["cnt"], False

            cursor.execute(
                "SELECT COUNT(*) AS cnt FROM group_members WHERE group_id = ?",
                (group_id,),
            )
            remaining = cursor.fetchone()["cnt"]
            if remaining == 0:
                cursor.execute("DELETE FROM groups WHERE id = ?", (group_id,))
                return True, 0, True
            return True, remaining, False
