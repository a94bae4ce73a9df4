"""
Service container for dependency injection and initialization.

This module centralizes service creation and wiring so bot.py only has to
build one container and hand its services to the cogs.

Usage:
    container = ServiceContainer(ServiceConfig(db_path="group_ping.db"))
    await container.initialize()

    group_service = container.group_service
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from services.group_registry import GroupRegistry
    from services.group_service import GroupService

from infrastructure.schema_manager import SchemaManager
from repositories.group_repository import GroupRepository
from utils.rate_limiter import ActionKind, CooldownTracker

logger = logging.getLogger("group_ping.infrastructure.container")


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Database
    db_path: str = "group_ping.db"

    # Cooldowns (seconds)
    create_cooldown_seconds: int = 300  # 5 minutes
    notify_cooldown_seconds: int = 60  # 1 minute


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection.
    The cooldown tracker lives here for the lifetime of the process; it is
    never persisted.
    """

    def __init__(self, config: ServiceConfig | None = None):
        self.config = config or ServiceConfig()
        self._initialized = False
        self._group_repo: GroupRepository | None = None
        self._cooldowns: CooldownTracker | None = None
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        self._init_database()
        self._init_repositories()
        self._init_services()
        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Create the schema and run migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")
        SchemaManager(self.config.db_path).initialize()

    def _init_repositories(self) -> None:
        logger.debug("Initializing repositories")
        self._group_repo = GroupRepository(self.config.db_path)

    def _init_services(self) -> None:
        logger.debug("Initializing services")

        from services.group_registry import GroupRegistry
        from services.group_service import GroupService

        self._cooldowns = CooldownTracker(
            {
                ActionKind.CREATE: self.config.create_cooldown_seconds,
                ActionKind.NOTIFY: self.config.notify_cooldown_seconds,
            }
        )
        registry = GroupRegistry(self._group_repo)
        self._services["group_registry"] = registry
        self._services["group"] = GroupService(registry, self._cooldowns)

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def group_repo(self) -> GroupRepository | None:
        return self._group_repo

    @property
    def cooldowns(self) -> CooldownTracker | None:
        return self._cooldowns

    @property
    def group_registry(self) -> "GroupRegistry | None":
        return self._services.get("group_registry")

    @property
    def group_service(self) -> "GroupService | None":
        return self._services.get("group")

    def expose_to_bot(self, bot) -> None:
        """
        Expose services to a Discord bot object.

        Cog setup() functions read them back via getattr(bot, "<name>").
        """
        bot.group_repo = self.group_repo
        bot.group_registry = self.group_registry
        bot.group_service = self.group_service
        bot.cooldowns = self.cooldowns
        logger.info("Services exposed to bot object")
