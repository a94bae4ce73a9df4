"""
Command-level group operations.

Wraps the GroupRegistry and CooldownTracker so the cog only deals with
Discord I/O. Gated actions reserve their cooldown atomically before acting
and release it again if the action fails, so only successes stay armed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from config import LOG_PINGS
from domain.models.group import Group
from services import error_codes
from services.group_registry import GroupRegistry, LeaveOutcome
from services.result import Result
from utils.rate_limiter import ActionKind, CooldownTracker

logger = logging.getLogger("group_ping.services.group")

# Discord caps autocomplete responses at 25 choices
AUTOCOMPLETE_LIMIT = 25


@dataclass(frozen=True)
class GroupSummary:
    group: Group
    member_count: int


@dataclass(frozen=True)
class PingPlan:
    """Everything the cog needs to send a group ping."""

    group: Group
    member_ids: list[int]


class GroupService:
    def __init__(self, registry: GroupRegistry, cooldowns: CooldownTracker):
        self.registry = registry
        self.cooldowns = cooldowns

    def _acquire_cooldown(self, user_id: int, action: ActionKind, verb: str) -> Result | None:
        """
        Reserve the cooldown slot for an action.

        Returns None when the caller may proceed (the cooldown is now armed),
        or an ON_COOLDOWN failure. Callers release the slot if the action fails.
        """
        status = self.cooldowns.try_acquire(user_id, action)
        if not status.on_cooldown:
            return None
        return Result.fail(
            f"You must wait {status.remaining_seconds} seconds before {verb}.",
            code=error_codes.ON_COOLDOWN,
        )

    def create(self, guild_id: int, user_id: int, name: str) -> Result[Group]:
        blocked = self._acquire_cooldown(user_id, ActionKind.CREATE, "creating another group")
        if blocked is not None:
            return blocked

        result = self._create(guild_id, user_id, name)
        if not result:
            self.cooldowns.release(user_id, ActionKind.CREATE)
        return result

    def _create(self, guild_id: int, user_id: int, name: str) -> Result[Group]:
        validation = self.registry.validate_name(name)
        if not validation:
            return validation  # type: ignore[return-value]

        # Advisory only; the unique constraint decides races.
        existing = self.registry.get_group_by_name(validation.value, guild_id)
        if existing:
            return Result.fail(
                "A group with this name already exists!", code=error_codes.CONFLICT
            )
        if existing.is_error(error_codes.PERSISTENCE_ERROR):
            return existing

        return self.registry.create_group(validation.value, guild_id, user_id)

    def join(self, guild_id: int, user_id: int, name: str) -> Result[Group]:
        lookup = self.registry.get_group_by_name(name, guild_id)
        if not lookup:
            return lookup
        group = lookup.value

        membership = self.registry.is_member(group.group_id, user_id)
        if not membership:
            return membership  # type: ignore[return-value]
        if membership.value:
            return Result.fail("You're already in this group!", code=error_codes.ALREADY_MEMBER)

        added = self.registry.add_member(group.group_id, user_id)
        if not added:
            return added  # type: ignore[return-value]
        logger.info(f"User {user_id} joined group {group.name!r} in guild {guild_id}")
        return Result.ok(group)

    def leave(self, guild_id: int, user_id: int, name: str) -> Result[LeaveOutcome]:
        lookup = self.registry.get_group_by_name(name, guild_id)
        if not lookup:
            return lookup  # type: ignore[return-value]
        result = self.registry.leave_group(lookup.value.group_id, user_id)
        if result:
            logger.info(f"User {user_id} left group {name!r} in guild {guild_id}")
        return result

    def list_groups(self, guild_id: int) -> Result[list[GroupSummary]]:
        groups = self.registry.list_groups_in_server(guild_id)
        if not groups:
            return groups  # type: ignore[return-value]
        if not groups.value:
            return Result.fail(
                "There are no groups in this server yet!", code=error_codes.NOT_FOUND
            )

        summaries = []
        for group in groups.value:
            count = self.registry.count_members(group.group_id)
            if not count:
                return count  # type: ignore[return-value]
            summaries.append(GroupSummary(group=group, member_count=count.value))
        return Result.ok(summaries)

    def members(self, guild_id: int, name: str) -> Result[set[int]]:
        lookup = self.registry.get_group_by_name(name, guild_id)
        if not lookup:
            return lookup  # type: ignore[return-value]
        members = self.registry.list_members(lookup.value.group_id)
        if members and not members.value:
            return Result.fail(f"Group **{name}** has no members!", code=error_codes.NOT_FOUND)
        return members

    def notify(self, guild_id: int, user_id: int, name: str) -> Result[PingPlan]:
        blocked = self._acquire_cooldown(user_id, ActionKind.NOTIFY, "pinging another group")
        if blocked is not None:
            return blocked

        result = self._notify(guild_id, user_id, name)
        if not result:
            self.cooldowns.release(user_id, ActionKind.NOTIFY)
        return result

    def _notify(self, guild_id: int, user_id: int, name: str) -> Result[PingPlan]:
        lookup = self.registry.get_group_by_name(name, guild_id)
        if not lookup:
            return lookup  # type: ignore[return-value]
        group = lookup.value

        membership = self.registry.is_member(group.group_id, user_id)
        if not membership:
            return membership  # type: ignore[return-value]
        if not membership.value:
            return Result.fail(
                "You must be a member of this group to ping it!", code=error_codes.NOT_MEMBER
            )

        touched = self.registry.touch_last_used(group.group_id)
        if not touched:
            return touched  # type: ignore[return-value]

        members = self.registry.list_members(group.group_id)
        if not members:
            return members  # type: ignore[return-value]

        log = logger.info if LOG_PINGS else logger.debug
        log(
            f"User {user_id} pinged group {group.name!r} in guild {guild_id} "
            f"({len(members.value)} members)"
        )
        return Result.ok(PingPlan(group=group, member_ids=sorted(members.value)))

    def force_delete(self, guild_id: int, name: str, is_admin: bool) -> Result[int]:
        """Admin-only delete. is_admin must come from the caller's permission check."""
        if not is_admin:
            return Result.fail(
                "Only server administrators can use this command!",
                code=error_codes.PERMISSION_DENIED,
            )
        lookup = self.registry.get_group_by_name(name, guild_id)
        if not lookup:
            return lookup  # type: ignore[return-value]
        result = self.registry.delete_group(lookup.value.group_id)
        if result:
            logger.info(f"Group {name!r} force-deleted in guild {guild_id}")
        return result

    def autocomplete(
        self,
        guild_id: int,
        user_id: int,
        command: str,
        current: str,
        is_admin: bool = False,
    ) -> list[Group]:
        """
        Group name suggestions for a command's `name` option.

        join: groups the user is not in. leave/ping: the user's groups.
        delete: nothing unless admin. Anything else: every group.
        Storage failures produce no suggestions.
        """
        if command == "delete" and not is_admin:
            return []

        if command in ("ping", "leave"):
            groups = self.registry.list_groups_for_user(guild_id, user_id).unwrap_or([])
        else:
            groups = self.registry.list_groups_in_server(guild_id).unwrap_or([])
            if command == "join" and groups:
                mine = self.registry.list_groups_for_user(guild_id, user_id).unwrap_or([])
                mine_ids = {g.group_id for g in mine}
                groups = [g for g in groups if g.group_id not in mine_ids]

        prefix = (current or "").lower()
        matches = [g for g in groups if g.name.lower().startswith(prefix)]
        return matches[:AUTOCOMPLETE_LIMIT]
