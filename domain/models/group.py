"""
Group domain model and naming rules.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from config import GROUP_NAME_MAX_LENGTH, GROUP_NAME_MIN_LENGTH

# Letters, digits, space, hyphen, underscore
GROUP_NAME_PATTERN = re.compile(r"[A-Za-z0-9 _-]+")


@dataclass(frozen=True)
class Group:
    """A named set of users scoped to one guild, used as a ping target."""

    group_id: int
    name: str
    guild_id: int
    creator_id: int
    last_used: int  # epoch milliseconds

    @classmethod
    def from_row(cls, row) -> Group:
        return cls(
            group_id=row["id"],
            name=row["name"],
            guild_id=row["guild_id"],
            creator_id=row["creator_id"],
            last_used=row["last_used"],
        )


def check_group_name(name: str) -> str | None:
    """
    Check a (trimmed) group name against the naming rules.

    Returns:
        None if the name is acceptable, otherwise a user-facing reason.
    """
    if len(name) < GROUP_NAME_MIN_LENGTH or len(name) > GROUP_NAME_MAX_LENGTH:
        return (
            f"Group name must be between {GROUP_NAME_MIN_LENGTH} and "
            f"{GROUP_NAME_MAX_LENGTH} characters long"
        )
    if not GROUP_NAME_PATTERN.fullmatch(name):
        return "Group name can only contain letters, numbers, spaces, hyphens, and underscores"
    return None
