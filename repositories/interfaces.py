"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod


class IGroupRepository(ABC):
    @abstractmethod
    def create_with_creator(
        self, name: str, guild_id: int, creator_id: int, last_used: int
    ) -> dict: ...

    @abstractmethod
    def get_by_name(self, name: str, guild_id: int) -> dict | None: ...

    @abstractmethod
    def get_by_id(self, group_id: int) -> dict | None: ...

    @abstractmethod
    def get_guild_groups(self, guild_id: int) -> list[dict]: ...

    @abstractmethod
    def get_user_guild_groups(self, guild_id: int, user_id: int) -> list[dict]: ...

    @abstractmethod
    def update_last_used(self, group_id: int, last_used: int) -> bool: ...

    @abstractmethod
    def get_member_ids(self, group_id: int) -> list[int]: ...

    @abstractmethod
    def count_members(self, group_id: int) -> int: ...

    @abstractmethod
    def add_member(self, group_id: int, user_id: int) -> bool: ...

    @abstractmethod
    def is_member(self, group_id: int, user_id: int) -> bool: ...

    @abstractmethod
    def remove_member(self, group_id: int, user_id: int) -> bool: ...

    @abstractmethod
    def delete_group(self, group_id: int) -> int | None: ...

    @abstractmethod
    def remove_member_and_prune(self, group_id: int, user_id: int) -> tuple[bool, int, bool]: ...
