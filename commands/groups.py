"""
Group commands: /create, /join, /leave, /list, /members, /ping, /delete
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from services.permissions import has_admin_permission
from utils.command_helpers import format_result_error, handle_result
from utils.formatting import (
    chunk_message,
    format_group_list,
    format_member_list,
    format_ping_message,
)
from utils.interaction_safety import safe_defer, safe_followup, safe_reply

if TYPE_CHECKING:
    from services.group_service import GroupService

logger = logging.getLogger("group_ping.commands.groups")


class GroupCommands(commands.Cog):
    """Create, join, leave and ping named groups of server members."""

    def __init__(self, bot: commands.Bot, group_service: GroupService):
        self.bot = bot
        self.group_service = group_service

    async def _name_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        if interaction.guild_id is None:
            return []
        command_name = interaction.command.name if interaction.command else ""
        try:
            groups = await asyncio.to_thread(
                self.group_service.autocomplete,
                interaction.guild_id,
                interaction.user.id,
                command_name,
                current,
                has_admin_permission(interaction),
            )
        except Exception as exc:
            logger.warning(f"Autocomplete failed for /{command_name}: {exc}")
            return []
        return [app_commands.Choice(name=g.name, value=g.name) for g in groups]

    @app_commands.command(name="create", description="Create a new group")
    @app_commands.describe(name="The name of the group")
    @app_commands.guild_only()
    async def create(self, interaction: discord.Interaction, name: str):
        logger.info(
            f"Create command: User {interaction.user.id} in guild {interaction.guild_id} "
            f"creating group {name!r}"
        )
        result = await asyncio.to_thread(
            self.group_service.create, interaction.guild_id, interaction.user.id, name
        )
        if result:
            msg = (
                f"✅ Created group **{result.value.name}** with "
                f"{interaction.user.mention} as the first member!"
            )
        else:
            msg = None
        await handle_result(interaction, result, msg)

    @app_commands.command(name="join", description="Join an existing group")
    @app_commands.describe(name="The name of the group")
    @app_commands.autocomplete(name=_name_autocomplete)
    @app_commands.guild_only()
    async def join(self, interaction: discord.Interaction, name: str):
        logger.info(f"Join command: User {interaction.user.id} joining group {name!r}")
        name = name.strip()
        result = await asyncio.to_thread(
            self.group_service.join, interaction.guild_id, interaction.user.id, name
        )
        await handle_result(
            interaction, result, f"✅ {interaction.user.mention} joined group **{name}**!"
        )

    @app_commands.command(name="leave", description="Leave a group")
    @app_commands.describe(name="The name of the group")
    @app_commands.autocomplete(name=_name_autocomplete)
    @app_commands.guild_only()
    async def leave(self, interaction: discord.Interaction, name: str):
        logger.info(f"Leave command: User {interaction.user.id} leaving group {name!r}")
        name = name.strip()
        result = await asyncio.to_thread(
            self.group_service.leave, interaction.guild_id, interaction.user.id, name
        )
        if result and result.value.group_deleted:
            msg = (
                f"✅ {interaction.user.mention} left and group **{name}** was deleted "
                "as it has no more members!"
            )
        else:
            msg = f"✅ {interaction.user.mention} left group **{name}**!"
        await handle_result(interaction, result, msg)

    @app_commands.command(name="list", description="List all available groups in the server")
    @app_commands.guild_only()
    async def list_groups(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await asyncio.to_thread(self.group_service.list_groups, interaction.guild_id)
        if not result:
            await safe_followup(interaction, content=format_result_error(result), ephemeral=True)
            return
        for chunk in chunk_message(format_group_list(result.value)):
            await safe_followup(interaction, content=chunk, ephemeral=True)

    @app_commands.command(
        name="members", description="List all members in a group without pinging them"
    )
    @app_commands.describe(name="The name of the group")
    @app_commands.autocomplete(name=_name_autocomplete)
    @app_commands.guild_only()
    async def members(self, interaction: discord.Interaction, name: str):
        if not await safe_defer(interaction, ephemeral=True):
            return

        name = name.strip()
        result = await asyncio.to_thread(self.group_service.members, interaction.guild_id, name)
        if not result:
            await safe_followup(interaction, content=format_result_error(result), ephemeral=True)
            return

        usernames = []
        for user_id in result.value:
            member = interaction.guild.get_member(user_id) if interaction.guild else None
            if member is None and interaction.guild is not None:
                try:
                    member = await interaction.guild.fetch_member(user_id)
                except discord.HTTPException as exc:
                    logger.warning(f"Failed to fetch member {user_id}: {exc}")
                    continue
            if member is not None:
                usernames.append(member.name)

        content = format_member_list(name, usernames)
        for chunk in chunk_message(content):
            await safe_followup(
                interaction,
                content=chunk,
                ephemeral=True,
                allowed_mentions=discord.AllowedMentions.none(),
            )

    @app_commands.command(name="ping", description="Ping all members of a group")
    @app_commands.describe(
        name="The name of the group",
        message="Optional message to send with the ping",
    )
    @app_commands.autocomplete(name=_name_autocomplete)
    @app_commands.guild_only()
    async def ping(self, interaction: discord.Interaction, name: str, message: str | None = None):
        logger.info(f"Ping command: User {interaction.user.id} pinging group {name!r}")
        name = name.strip()
        result = await asyncio.to_thread(
            self.group_service.notify, interaction.guild_id, interaction.user.id, name
        )
        if not result:
            await safe_reply(interaction, content=format_result_error(result), ephemeral=True)
            return

        plan = result.value
        content = format_ping_message(plan.group.name, plan.member_ids, message)
        mentions = discord.AllowedMentions(users=True, roles=False, everyone=False)
        chunks = chunk_message(content)
        await safe_reply(interaction, content=chunks[0], allowed_mentions=mentions)
        for chunk in chunks[1:]:
            await safe_followup(interaction, content=chunk, allowed_mentions=mentions)

    @app_commands.command(
        name="delete", description="Force delete a group (server administrators only)"
    )
    @app_commands.describe(name="The name of the group")
    @app_commands.autocomplete(name=_name_autocomplete)
    @app_commands.guild_only()
    async def delete(self, interaction: discord.Interaction, name: str):
        logger.info(f"Delete command: User {interaction.user.id} deleting group {name!r}")
        name = name.strip()
        result = await asyncio.to_thread(
            self.group_service.force_delete,
            interaction.guild_id,
            name,
            has_admin_permission(interaction),
        )
        await handle_result(interaction, result, f"✅ Group **{name}** has been deleted!")


async def setup(bot: commands.Bot):
    """Setup function called when loading the cog."""
    group_service = getattr(bot, "group_service", None)
    if group_service is None:
        logger.warning("groups cog: group_service not available, skipping")
        return
    await bot.add_cog(GroupCommands(bot, group_service))
