"""
Standard error codes for the service layer.

These error codes allow command handlers to programmatically handle
specific error conditions without parsing error message text.

Usage:
    from services import error_codes
    from services.result import Result

    if group is None:
        return Result.fail("This group doesn't exist!", code=error_codes.NOT_FOUND)
"""

# General errors
NOT_FOUND = "not_found"
PERMISSION_DENIED = "permission_denied"
PERSISTENCE_ERROR = "persistence_error"
ON_COOLDOWN = "on_cooldown"

# Group errors
INVALID_NAME = "invalid_name"
CONFLICT = "conflict"

# Membership errors
ALREADY_MEMBER = "already_member"
NOT_MEMBER = "not_member"
