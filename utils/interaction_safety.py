"""
Helpers for responding to Discord interactions without blowing up.

Interactions expire (3s to first response, 15min for followups) and users
can dismiss them; these wrappers log and swallow the resulting HTTP errors
so a command handler never crashes halfway through.
"""

from __future__ import annotations

import logging
from typing import Any

import discord

logger = logging.getLogger("group_ping.interaction_safety")


async def safe_defer(interaction: discord.Interaction, ephemeral: bool = False) -> bool:
    """
    Defer the interaction response.

    Returns:
        True if the interaction is (now) deferred or already responded to,
        False if Discord rejected the defer (expired/unknown interaction).
    """
    try:
        if interaction.response.is_done():
            return True
        await interaction.response.defer(ephemeral=ephemeral)
        return True
    except discord.HTTPException as exc:
        logger.warning(f"Failed to defer interaction {getattr(interaction, 'id', '?')}: {exc}")
        return False


async def safe_followup(interaction: discord.Interaction, **kwargs: Any):
    """
    Send a followup message. Returns the sent message, or None on failure.
    """
    try:
        return await interaction.followup.send(**kwargs)
    except discord.HTTPException as exc:
        logger.warning(f"Failed to send followup for interaction {getattr(interaction, 'id', '?')}: {exc}")
        return None


async def safe_reply(interaction: discord.Interaction, **kwargs: Any):
    """
    Reply using the initial response if still available, otherwise a followup.
    """
    try:
        if interaction.response.is_done():
            return await interaction.followup.send(**kwargs)
        await interaction.response.send_message(**kwargs)
        return None
    except discord.HTTPException as exc:
        logger.warning(f"Failed to reply to interaction {getattr(interaction, 'id', '?')}: {exc}")
        return None
