"""
Centralized configuration for the Group Ping bot.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_int_list(env_var: str, default: list[int]) -> list[int]:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return [int(x.strip()) for x in raw.split(",") if x.strip()]
    except ValueError:
        return default


def _default_db_path() -> str:
    """Use the container volume at /db when it is mounted, else the working directory."""
    base = "/db" if os.path.isdir("/db") else "."
    return os.path.join(base, "group_ping.db")


DB_PATH = os.getenv("DB_PATH") or _default_db_path()
DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN")
ADMIN_USER_IDS: list[int] = _parse_int_list("ADMIN_USER_IDS", [])
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Cooldowns (seconds). PING_TIMEOUT / CREATE_TIMEOUT are accepted for older deployments.
CREATE_COOLDOWN_SECONDS = _parse_int(
    "CREATE_COOLDOWN_SECONDS", _parse_int("CREATE_TIMEOUT", 300)
)  # 5 minutes
NOTIFY_COOLDOWN_SECONDS = _parse_int(
    "NOTIFY_COOLDOWN_SECONDS", _parse_int("PING_TIMEOUT", 60)
)  # 1 minute

# Group name rules
GROUP_NAME_MIN_LENGTH = 2
GROUP_NAME_MAX_LENGTH = 32

# Member listing switches from a bulleted list to a comma-separated line above this size
MEMBERS_VERTICAL_LIST_MAX = _parse_int("MEMBERS_VERTICAL_LIST_MAX", 20)

# Log every ping (guild, group, member count) at INFO instead of DEBUG
LOG_PINGS = _parse_bool("LOG_PINGS", True)
