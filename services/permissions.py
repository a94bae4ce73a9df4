"""
Permission checking utilities for the bot.
"""

import discord

from config import ADMIN_USER_IDS


def has_admin_permission(interaction: discord.Interaction) -> bool:
    """
    Check if user may force-delete groups.

    Users listed in ADMIN_USER_IDS always pass. Otherwise the user needs the
    Administrator permission in the invoking guild.
    """
    if interaction.user.id in ADMIN_USER_IDS:
        return True

    # Permissions resolved for this interaction's channel (set for guild interactions)
    perms = getattr(interaction, "permissions", None)
    if perms is not None and getattr(perms, "administrator", False):
        return True

    # Fallback: interaction.user may already be a Member-like object with guild_permissions
    member_perms = getattr(interaction.user, "guild_permissions", None)
    if member_perms:
        return bool(getattr(member_perms, "administrator", False))

    return False
