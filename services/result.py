"""
Result type for consistent error handling across services.

Registry and service methods return a Result[T] instead of raising for
expected conditions (unknown group, duplicate name, active cooldown), so the
command layer can always render a user-facing reply.

Usage:
    return Result.ok(group)
    return Result.ok()          # void operations (e.g. touch_last_used)
    return Result.fail("This group doesn't exist!", code=error_codes.NOT_FOUND)

    result = registry.get_group_by_name("raid-team", guild_id)
    if result:
        group = result.value
    elif result.error_code == error_codes.NOT_FOUND:
        ...
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Success-with-value or a named failure.

    Attributes:
        success: Whether the operation succeeded
        value: The return value if successful (None if failed or void operation)
        error: User-facing error message if failed
        error_code: One of services.error_codes for programmatic handling
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        return cls(success=False, error=error, error_code=code)

    def __bool__(self) -> bool:
        return self.success

    def is_error(self, code: str) -> bool:
        """True if this is a failure carrying the given error code."""
        return not self.success and self.error_code == code

    def unwrap(self) -> T:
        """
        Get the value, raising ValueError if the result is a failure.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value  # type: ignore

    def unwrap_or(self, default: T) -> T:
        return self.value if self.success else default  # type: ignore

    def map(self, fn: "Callable[[T], Result[U]]") -> "Result[U]":
        """
        Chain operations on successful results.

        Failures pass through unchanged; fn is only called on success.
        """
        if not self.success:
            return self  # type: ignore
        return fn(self.value)  # type: ignore
