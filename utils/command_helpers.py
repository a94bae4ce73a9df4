"""
Command helper utilities for Discord slash commands.

Provides utilities for handling service Results in command handlers,
reducing boilerplate and ensuring consistent error reporting.
"""

import discord
from typing import TYPE_CHECKING

from utils.interaction_safety import safe_reply

if TYPE_CHECKING:
    from services.result import Result


async def handle_result(
    interaction: discord.Interaction,
    result: "Result",
    success_msg: str | None = None,
    ephemeral: bool = False,
) -> bool:
    """
    Handle a service Result, sending appropriate Discord response.

    Failures are always reported ephemerally as "❌ <error>". On success,
    success_msg (if any) is sent with the requested visibility.

    Returns:
        True if the result was successful, False otherwise

    Usage:
        result = await asyncio.to_thread(self.group_service.join, ...)
        if not await handle_result(interaction, result):
            return  # Error was already reported to user
    """
    if not result.success:
        await safe_reply(interaction, content=format_result_error(result), ephemeral=True)
        return False

    if success_msg:
        await safe_reply(
            interaction,
            content=success_msg,
            ephemeral=ephemeral,
            allowed_mentions=discord.AllowedMentions.none(),
        )
    return True


def format_result_error(result: "Result") -> str:
    """
    Format a Result error for display.

    Args:
        result: A failed Result

    Returns:
        Formatted error string
    """
    if result.success:
        return ""
    return f"❌ {result.error or 'Something went wrong.'}"
