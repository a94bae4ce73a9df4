"""Tests for ServiceContainer."""

import pytest

from infrastructure.schema_manager import SchemaManager
from infrastructure.service_container import ServiceConfig, ServiceContainer
from repositories.group_repository import GroupRepository
from services.group_registry import GroupRegistry
from services.group_service import GroupService
from utils.rate_limiter import ActionKind, CooldownTracker


@pytest.fixture
def config(tmp_path):
    """Create a test configuration."""
    return ServiceConfig(
        db_path=str(tmp_path / "container.db"),
        create_cooldown_seconds=30,
        notify_cooldown_seconds=5,
    )


class TestServiceContainerInitialization:
    """Tests for ServiceContainer initialization."""

    @pytest.mark.asyncio
    async def test_initialize_creates_services(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        assert container.group_repo is not None
        assert isinstance(container.cooldowns, CooldownTracker)
        assert isinstance(container.group_registry, GroupRegistry)
        assert isinstance(container.group_service, GroupService)

    @pytest.mark.asyncio
    async def test_services_share_registry_and_tracker(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        assert container.group_service.registry is container.group_registry
        assert container.group_service.cooldowns is container.cooldowns
        assert container.group_registry.group_repo is container.group_repo

    @pytest.mark.asyncio
    async def test_cooldown_durations_come_from_config(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        assert container.cooldowns.durations == {ActionKind.CREATE: 30, ActionKind.NOTIFY: 5}

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, config):
        container = ServiceContainer(config)
        await container.initialize()
        service = container.group_service

        await container.initialize()
        assert container.group_service is service

    @pytest.mark.asyncio
    async def test_is_initialized_flag(self, config):
        container = ServiceContainer(config)
        assert container.is_initialized is False

        await container.initialize()
        assert container.is_initialized is True


class TestSchemaInitialization:
    """The container is the only place the schema gets created."""

    @pytest.mark.asyncio
    async def test_schema_initialized_once_per_startup(self, config, monkeypatch):
        calls = []
        original = SchemaManager.initialize

        def counting_initialize(self):
            calls.append(self.db_path)
            original(self)

        monkeypatch.setattr(SchemaManager, "initialize", counting_initialize)

        container = ServiceContainer(config)
        await container.initialize()

        assert calls == [config.db_path]

    def test_repository_does_not_create_schema(self, tmp_path):
        db_path = str(tmp_path / "bare.db")
        repo = GroupRepository(db_path)

        with repo.connection() as conn:
            tables = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()

        assert tables == []


class TestServiceContainerDefaults:
    def test_default_config_used_when_none(self):
        container = ServiceContainer()
        assert container.config.create_cooldown_seconds == 300
        assert container.config.notify_cooldown_seconds == 60


class TestServiceContainerBotExposure:
    @pytest.mark.asyncio
    async def test_expose_to_bot_sets_attributes(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        class MockBot:
            pass

        bot = MockBot()
        container.expose_to_bot(bot)

        assert bot.group_service is container.group_service
        assert bot.group_registry is container.group_registry
        assert bot.group_repo is container.group_repo
        assert bot.cooldowns is container.cooldowns

    @pytest.mark.asyncio
    async def test_container_services_work_end_to_end(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        created = container.group_service.create(1, 10, "raid-team")
        assert created.success
        assert container.group_service.members(1, "raid-team").value == {10}
