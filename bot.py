"""
Main Discord bot entry for Group Ping.
"""

import logging
import os

from config import LOG_LEVEL

# Configure logging BEFORE importing discord to prevent duplicate handlers
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,  # Override any existing handlers (e.g., from discord.py)
)
logger = logging.getLogger("group_ping")


# Suppress PyNaCl warning since voice support isn't needed
class _PyNaClFilter(logging.Filter):
    """Filter out the PyNaCl warning from discord.py."""

    def filter(self, record):
        return "PyNaCl is not installed" not in record.getMessage()


logging.getLogger("discord.client").addFilter(_PyNaClFilter())

# Now import discord after logging is configured
import discord
from discord.ext import commands

# discord.py adds its own handler to the 'discord' logger on import
_discord_logger = logging.getLogger("discord")
_discord_logger.handlers.clear()
_discord_logger.setLevel(logging.INFO)

from config import CREATE_COOLDOWN_SECONDS, DB_PATH, NOTIFY_COOLDOWN_SECONDS
from infrastructure.service_container import ServiceConfig, ServiceContainer

# Bot setup

intents = discord.Intents.default()
intents.members = True  # /members resolves usernames from member IDs

bot = commands.Bot(command_prefix="!", intents=intents)

# Lazy-initialized service container
_container: ServiceContainer | None = None

EXTENSIONS = [
    "commands.groups",
]

# Permission bits requested in the invite link (Send Messages)
INVITE_PERMISSIONS = 2048


async def _init_services():
    """Initialize all services via ServiceContainer (lazy, idempotent)."""
    global _container
    if _container is not None:
        return

    _container = ServiceContainer(
        ServiceConfig(
            db_path=DB_PATH,
            create_cooldown_seconds=CREATE_COOLDOWN_SECONDS,
            notify_cooldown_seconds=NOTIFY_COOLDOWN_SECONDS,
        )
    )
    await _container.initialize()
    _container.expose_to_bot(bot)


async def _load_extensions():
    """Load command extensions if not already loaded."""
    await _init_services()

    loaded_extensions = []
    failed_extensions = []

    for ext in EXTENSIONS:
        if ext in bot.extensions:
            logger.debug(f"Extension {ext} already loaded, skipping")
            continue
        try:
            await bot.load_extension(ext)
            loaded_extensions.append(ext)
            logger.info(f"Loaded extension: {ext}")
        except Exception as exc:
            failed_extensions.append(ext)
            logger.error(f"Failed to load extension {ext}: {exc}", exc_info=True)

    logger.info(
        f"Extension loading complete: {len(loaded_extensions)} loaded, "
        f"{len(failed_extensions)} failed. "
        f"Registered commands: {[c.name for c in bot.tree.walk_commands()]}"
    )


@bot.event
async def setup_hook():
    """Load command cogs."""
    await _load_extensions()


@bot.event
async def on_ready():
    """Called when bot is ready."""
    logger.info(f"{bot.user} connected. Guilds: {len(bot.guilds)}")
    logger.info(
        "Add to server: https://discord.com/api/oauth2/authorize"
        f"?client_id={bot.user.id}&permissions={INVITE_PERMISSIONS}"
        "&scope=bot%20applications.commands"
    )

    try:
        synced = await bot.tree.sync()
        logger.info(f"Slash commands synced globally ({len(synced)} commands).")
    except Exception as exc:
        logger.error(f"Failed to sync commands: {exc}", exc_info=True)


@bot.tree.error
async def on_app_command_error(interaction: discord.Interaction, error: discord.app_commands.AppCommandError):
    """Global error handler for app commands - prevents infinite 'thinking...' state."""
    logger.error(
        f"App command error in '{interaction.command.name if interaction.command else 'unknown'}': {error}",
        exc_info=error,
    )

    if isinstance(error, discord.app_commands.NoPrivateMessage):
        error_msg = "This command can only be used in a server."
    else:
        error_msg = "An unexpected error occurred while processing your command."

    try:
        if interaction.response.is_done():
            await interaction.followup.send(content=f"❌ {error_msg}", ephemeral=True)
        else:
            await interaction.response.send_message(content=f"❌ {error_msg}", ephemeral=True)
    except Exception as followup_error:
        logger.error(f"Failed to send error message to user: {followup_error}")


def main():
    """Run the bot."""
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        from dotenv import load_dotenv

        load_dotenv()
        token = os.getenv("DISCORD_BOT_TOKEN")

    if not token:
        logger.error("DISCORD_BOT_TOKEN not found!")
        return

    try:
        # Pass log_handler=None to prevent discord.py from adding its own handler
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
    except Exception as exc:
        logger.error(f"Bot crashed: {exc}", exc_info=True)


if __name__ == "__main__":
    main()
