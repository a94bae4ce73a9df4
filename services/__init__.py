"""
Application services layer.

Services orchestrate group operations using repositories and the cooldown tracker.
"""

from services.group_registry import GroupRegistry, LeaveOutcome
from services.group_service import GroupService, GroupSummary, PingPlan
from services.permissions import has_admin_permission

# Result type for consistent error handling
from services.result import Result

__all__ = [
    # Concrete services
    "GroupRegistry",
    "GroupService",
    "GroupSummary",
    "LeaveOutcome",
    "PingPlan",
    # Permissions
    "has_admin_permission",
    # Result type
    "Result",
]
