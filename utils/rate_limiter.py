"""
In-memory per-user cooldowns for spam-prone commands.

This is not meant to be a perfect security boundary (restarts reset state),
but it stops a user from creating groups or pinging members in a tight loop.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("group_ping.rate_limiter")


class ActionKind(str, Enum):
    CREATE = "create"
    NOTIFY = "notify"


@dataclass(frozen=True)
class CooldownStatus:
    on_cooldown: bool
    remaining_seconds: int = 0


class CooldownTracker:
    """
    Remembers when each (user, action) pair last succeeded.

    Expired entries are evicted lazily by check_cooldown(); sweep() can be
    called to drop all of them at once.
    """

    def __init__(
        self,
        durations: dict[ActionKind, int],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.durations = dict(durations)
        self._clock = clock
        # (user_id, action) -> clock() value of the last successful use
        self._last_used: dict[tuple[int, ActionKind], float] = {}
        # Commands hop to worker threads; keep the map consistent across them.
        self._lock = threading.Lock()

    def check_cooldown(self, user_id: int, action: ActionKind) -> CooldownStatus:
        key = (user_id, action)
        with self._lock:
            last = self._last_used.get(key)
            if last is None:
                return CooldownStatus(on_cooldown=False)

            elapsed = self._clock() - last
            duration = self.durations.get(action, 0)
            if elapsed >= duration:
                del self._last_used[key]
                return CooldownStatus(on_cooldown=False)

        remaining = math.ceil(duration - elapsed)
        logger.debug(f"User {user_id} on {action.value} cooldown: {remaining}s left")
        return CooldownStatus(on_cooldown=True, remaining_seconds=remaining)

    def arm(self, user_id: int, action: ActionKind) -> None:
        """Start (or restart) the cooldown. Call only after the action succeeded."""
        with self._lock:
            self._last_used[(user_id, action)] = self._clock()

    def try_acquire(self, user_id: int, action: ActionKind) -> CooldownStatus:
        """
        Check and arm in one step.

        If the user is not on cooldown the key is armed immediately and the
        returned status is "not on cooldown". Call release() if the gated
        action then fails.
        """
        key = (user_id, action)
        with self._lock:
            now = self._clock()
            last = self._last_used.get(key)
            duration = self.durations.get(action, 0)
            if last is not None and now - last < duration:
                remaining = math.ceil(duration - (now - last))
                logger.debug(f"User {user_id} on {action.value} cooldown: {remaining}s left")
                return CooldownStatus(on_cooldown=True, remaining_seconds=remaining)
            self._last_used[key] = now
        return CooldownStatus(on_cooldown=False)

    def release(self, user_id: int, action: ActionKind) -> None:
        """Undo a try_acquire() whose action did not succeed."""
        with self._lock:
            self._last_used.pop((user_id, action), None)

    def reset(self, user_id: int | None = None) -> None:
        """Clear cooldowns for one user, or for everyone when user_id is None."""
        with self._lock:
            if user_id is None:
                self._last_used.clear()
                return
            for key in [k for k in self._last_used if k[0] == user_id]:
                del self._last_used[key]

    def sweep(self) -> int:
        """Evict every expired entry. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [
                key
                for key, last in self._last_used.items()
                if now - last >= self.durations.get(key[1], 0)
            ]
            for key in expired:
                del self._last_used[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_used)

    def __contains__(self, key: tuple[int, ActionKind]) -> bool:
        with self._lock:
            return key in self._last_used
