"""
Group Registry: durable groups and memberships with their consistency rules.

Every method returns a Result. Expected conditions (unknown group, duplicate
name) are failures with an error code; storage exceptions are logged and
reported as PERSISTENCE_ERROR. Nothing is retried automatically.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass

from domain.models.group import Group, check_group_name
from repositories.interfaces import IGroupRepository
from services import error_codes
from services.result import Result

logger = logging.getLogger("group_ping.services.registry")

GROUP_NOT_FOUND_MSG = "This group doesn't exist!"
STORAGE_FAILURE_MSG = "Something went wrong talking to the database. Please try again."


@dataclass(frozen=True)
class LeaveOutcome:
    """What happened when a member left a group."""

    group_deleted: bool
    remaining_members: int


def _now_ms() -> int:
    return int(time.time() * 1000)


class GroupRegistry:
    """
    Owns all reads and writes of groups and memberships.

    Args:
        group_repo: storage for the groups/group_members tables
        clock: returns the current time in epoch milliseconds (used for last_used)
    """

    def __init__(self, group_repo: IGroupRepository, clock: Callable[[], int] = _now_ms):
        self.group_repo = group_repo
        self._clock = clock

    # --- Names ---

    @staticmethod
    def validate_name(name: str) -> Result[str]:
        """Trim and check a group name. Succeeds with the trimmed name."""
        trimmed = name.strip()
        reason = check_group_name(trimmed)
        if reason:
            return Result.fail(reason, code=error_codes.INVALID_NAME)
        return Result.ok(trimmed)

    # --- Groups ---

    def create_group(self, name: str, guild_id: int, creator_id: int) -> Result[Group]:
        """Create a group with its creator as the first member."""
        validation = self.validate_name(name)
        if not validation:
            logger.info(f"Rejected group name {name!r}: {validation.error}")
            return validation  # type: ignore[return-value]
        trimmed = validation.value

        try:
            row = self.group_repo.create_with_creator(
                trimmed, guild_id, creator_id, self._clock()
            )
        except sqlite3.IntegrityError:
            logger.info(f"Group name {trimmed!r} already taken in guild {guild_id}")
            return Result.fail(
                "A group with this name already exists!", code=error_codes.CONFLICT
            )
        except sqlite3.Error as exc:
            logger.error(f"Error creating group {trimmed!r}: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)

        group = Group.from_row(row)
        logger.info(
            f"Created group {group.name!r} (id={group.group_id}) in guild {guild_id} "
            f"for user {creator_id}"
        )
        return Result.ok(group)

    def get_group_by_name(self, name: str, guild_id: int) -> Result[Group]:
        try:
            row = self.group_repo.get_by_name(name, guild_id)
        except sqlite3.Error as exc:
            logger.error(f"Error getting group {name!r}: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        if row is None:
            return Result.fail(GROUP_NOT_FOUND_MSG, code=error_codes.NOT_FOUND)
        return Result.ok(Group.from_row(row))

    def get_group(self, group_id: int) -> Result[Group]:
        try:
            row = self.group_repo.get_by_id(group_id)
        except sqlite3.Error as exc:
            logger.error(f"Error getting group {group_id}: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        if row is None:
            return Result.fail(GROUP_NOT_FOUND_MSG, code=error_codes.NOT_FOUND)
        return Result.ok(Group.from_row(row))

    def list_groups_in_server(self, guild_id: int) -> Result[list[Group]]:
        """All groups in a guild, least recently used first."""
        try:
            rows = self.group_repo.get_guild_groups(guild_id)
        except sqlite3.Error as exc:
            logger.error(f"Error getting guild groups: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        return Result.ok([Group.from_row(row) for row in rows])

    def list_groups_for_user(self, guild_id: int, user_id: int) -> Result[list[Group]]:
        """Groups in a guild the user belongs to, least recently used first."""
        try:
            rows = self.group_repo.get_user_guild_groups(guild_id, user_id)
        except sqlite3.Error as exc:
            logger.error(f"Error getting user guild groups: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        return Result.ok([Group.from_row(row) for row in rows])

    def touch_last_used(self, group_id: int) -> Result[None]:
        try:
            updated = self.group_repo.update_last_used(group_id, self._clock())
        except sqlite3.Error as exc:
            logger.error(f"Error updating group last used: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        if not updated:
            return Result.fail(GROUP_NOT_FOUND_MSG, code=error_codes.NOT_FOUND)
        return Result.ok()

    def delete_group(self, group_id: int) -> Result[int]:
        """
        Delete all memberships, then the group, in one transaction.

        Succeeds with the number of membership rows removed. An unknown id
        fails with NOT_FOUND.
        """
        try:
            removed = self.group_repo.delete_group(group_id)
        except sqlite3.Error as exc:
            logger.error(f"Error deleting group {group_id}: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        if removed is None:
            return Result.fail(GROUP_NOT_FOUND_MSG, code=error_codes.NOT_FOUND)
        logger.info(f"Deleted group {group_id} ({removed} memberships removed)")
        return Result.ok(removed)

    # --- Members ---

    def list_members(self, group_id: int) -> Result[set[int]]:
        try:
            return Result.ok(set(self.group_repo.get_member_ids(group_id)))
        except sqlite3.Error as exc:
            logger.error(f"Error getting group members: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)

    def count_members(self, group_id: int) -> Result[int]:
        try:
            return Result.ok(self.group_repo.count_members(group_id))
        except sqlite3.Error as exc:
            logger.error(f"Error counting group members: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)

    def add_member(self, group_id: int, user_id: int) -> Result[None]:
        """Idempotent join: an existing membership counts as success."""
        try:
            self.group_repo.add_member(group_id, user_id)
        except sqlite3.IntegrityError:
            # Only the foreign key can fail here; the pair conflict is ignored in SQL.
            return Result.fail(GROUP_NOT_FOUND_MSG, code=error_codes.NOT_FOUND)
        except sqlite3.Error as exc:
            logger.error(f"Error adding member to group: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        return Result.ok()

    def is_member(self, group_id: int, user_id: int) -> Result[bool]:
        try:
            return Result.ok(self.group_repo.is_member(group_id, user_id))
        except sqlite3.Error as exc:
            logger.error(f"Error checking group membership: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)

    def remove_member(self, group_id: int, user_id: int) -> Result[None]:
        """Idempotent leave at the storage layer: a missing membership is not an error."""
        try:
            self.group_repo.remove_member(group_id, user_id)
        except sqlite3.Error as exc:
            logger.error(f"Error removing member from group: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)
        return Result.ok()

    def leave_group(self, group_id: int, user_id: int) -> Result[LeaveOutcome]:
        """
        Remove a member and delete the group if that left it empty.

        Both steps share one write-locked transaction, so zero-member groups
        never persist and a concurrent join cannot be swallowed by the delete.
        """
        try:
            removed, remaining, deleted = self.group_repo.remove_member_and_prune(
                group_id, user_id
            )
        except sqlite3.Error as exc:
            logger.error(f"Error leaving group {group_id}: {exc}", exc_info=True)
            return Result.fail(STORAGE_FAILURE_MSG, code=error_codes.PERSISTENCE_ERROR)

        if not removed:
            return Result.fail(
                "You're not a member of this group!", code=error_codes.NOT_MEMBER
            )
        if deleted:
            logger.info(f"Group {group_id} deleted after last member {user_id} left")
        return Result.ok(LeaveOutcome(group_deleted=deleted, remaining_members=remaining))
