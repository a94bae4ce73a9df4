"""
Pytest fixtures for tests.

Uses a session-scoped schema template so migrations run once; each test
copies the resulting database file instead of re-initializing.
"""

import shutil

import pytest

from infrastructure.schema_manager import SchemaManager
from repositories.group_repository import GroupRepository
from services.group_registry import GroupRegistry
from services.group_service import GroupService
from utils.rate_limiter import ActionKind, CooldownTracker


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

TEST_GUILD_ID = 12345
"""Standard guild ID for single-guild tests. Import and use this constant."""

TEST_GUILD_ID_SECONDARY = 67890
"""Secondary guild ID for multi-guild isolation tests."""

CREATE_COOLDOWN = 300
NOTIFY_COOLDOWN = 60


class FakeClock:
    """Manually advanced clock for cooldown and last_used tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StepClock:
    """Millisecond clock that ticks forward on every read, so last_used values are distinct."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    SchemaManager(template_path).initialize()
    yield template_path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """
    Create a temporary database with initialized schema for repository tests.

    Fast: file copy instead of schema initialization.
    """
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


@pytest.fixture
def group_repository(repo_db_path):
    return GroupRepository(repo_db_path)


@pytest.fixture
def step_clock():
    return StepClock()


@pytest.fixture
def registry(group_repository, step_clock):
    return GroupRegistry(group_repository, clock=step_clock)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def cooldowns(fake_clock):
    return CooldownTracker(
        {ActionKind.CREATE: CREATE_COOLDOWN, ActionKind.NOTIFY: NOTIFY_COOLDOWN},
        clock=fake_clock,
    )


@pytest.fixture
def group_service(registry, cooldowns):
    return GroupService(registry, cooldowns)
