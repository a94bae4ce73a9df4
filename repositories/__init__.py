"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.group_repository import GroupRepository
from repositories.interfaces import IGroupRepository

__all__ = [
    "BaseRepository",
    "GroupRepository",
    "IGroupRepository",
]
