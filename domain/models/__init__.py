"""
Domain models - pure data structures representing business entities.
"""

from domain.models.group import Group, check_group_name

__all__ = ["Group", "check_group_name"]
