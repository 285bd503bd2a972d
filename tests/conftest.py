"""Test configuration and fixtures for the ELC Library MCP server.

1. Isolated storage areas - each test gets its own SQLite file
2. Contexts - several stores attached to one area, like browser tabs
3. A library state with a fixed clock, so due dates are predictable
4. Process-wide singletons reset around every test
5. Mocked MCP contexts for sampling
"""

import os
from collections.abc import Generator
from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import logfire
import pytest
from mcp.types import TextContent

from elc_library.assistant import reset_assistant
from elc_library.config import LibraryConfig, reset_config
from elc_library.models import Book, BookCategory, BookLevel
from elc_library.state import LibraryState, get_library_state, reset_library_state
from elc_library.storage import (
    DatabaseManager,
    PersistentStore,
    StorageArea,
    reset_db_manager,
    reset_storage_area,
)

FIXED_TODAY = date(2026, 3, 2)


def pytest_configure(config):
    """Keep Logfire local."""
    logfire.configure(send_to_logfire=False, console=False)


def _reset_globals() -> None:
    reset_assistant()
    reset_library_state()
    reset_storage_area()
    reset_db_manager()
    reset_config()


@pytest.fixture(autouse=True)
def isolate_singletons(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Every test starts without a process-wide config, storage or state."""
    monkeypatch.setenv("ELC_LIBRARY_DATABASE_PATH", str(tmp_path / "default_profile.db"))
    _reset_globals()
    yield
    _reset_globals()


# === Storage Fixtures ===


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """A per-test SQLite file standing in for one browser profile."""
    return tmp_path / "test_elc_library.db"


@pytest.fixture
def test_database_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db_manager(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    manager = DatabaseManager(test_database_url)
    yield manager
    manager.close()


@pytest.fixture
def storage_area(db_manager: DatabaseManager) -> StorageArea:
    return StorageArea(db_manager)


@pytest.fixture
def store(storage_area: StorageArea) -> Generator[PersistentStore, None, None]:
    """The first tab."""
    context = storage_area.open_context("tab-a")
    yield context
    context.close()


@pytest.fixture
def other_store(storage_area: StorageArea) -> Generator[PersistentStore, None, None]:
    """A second tab on the same profile."""
    context = storage_area.open_context("tab-b")
    yield context
    context.close()


@pytest.fixture
def remote_area(test_database_url: str) -> Generator[StorageArea, None, None]:
    """The same profile opened by another server process, with its own connection."""
    manager = DatabaseManager(test_database_url)
    yield StorageArea(manager)
    manager.close()


@pytest.fixture
def remote_store(remote_area: StorageArea) -> Generator[PersistentStore, None, None]:
    context = remote_area.open_context("process-b")
    yield context
    context.close()


# === Domain Fixtures ===


@pytest.fixture
def today() -> date:
    return FIXED_TODAY


@pytest.fixture
def small_catalog() -> list[Book]:
    """Three available books across two categories."""
    return [
        Book(
            id="b1",
            title="Speakout Intermediate Teacher's Book",
            author="J. J. Wilson, Antonia Clare",
            isbn="9781447976851",
            category=BookCategory.TEACHER_RESOURCE,
            level=BookLevel.INTERMEDIATE,
        ),
        Book(
            id="b2",
            title="English for Medicine in Higher Education Studies",
            author="Patrick Fitzgerald",
            isbn="9781859644478",
            category=BookCategory.ESP,
            level=BookLevel.ADVANCED,
        ),
        Book(
            id="b3",
            title="Professional English in Use: Law",
            author="Gillian D. Brown, Sally Rice",
            isbn="9780521685429",
            category=BookCategory.ESP,
            level=BookLevel.ADVANCED,
        ),
    ]


@pytest.fixture
def state(
    store: PersistentStore, small_catalog: list[Book], today: date
) -> Generator[LibraryState, None, None]:
    """A state on tab-a seeded with the small catalog and a fixed clock."""
    library = LibraryState(
        store, loan_period_days=30, today=lambda: today, default_catalog=small_catalog
    )
    yield library
    library.close()


@pytest.fixture
def other_state(
    other_store: PersistentStore, small_catalog: list[Book], today: date, state: LibraryState
) -> Generator[LibraryState, None, None]:
    """A state on tab-b, opened after tab-a so both see the same catalog."""
    library = LibraryState(
        other_store, loan_period_days=30, today=lambda: today, default_catalog=small_catalog
    )
    yield library
    library.close()


# === Configuration Fixtures ===


@pytest.fixture
def test_config(test_db_path: Path) -> Generator[LibraryConfig, None, None]:
    """Test-specific configuration with an isolated database."""
    reset_config()
    config = LibraryConfig(
        server_name="test-elc-library",
        server_version="0.0.1-test",
        database_path=test_db_path,
        debug=True,
        log_level="DEBUG",
    )
    yield config
    reset_config()


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove every ELC_LIBRARY_* variable for the duration of a test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("ELC_LIBRARY_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def app_state(
    clean_env, test_db_path: Path, monkeypatch: pytest.MonkeyPatch
) -> LibraryState:
    """The process-wide state the tools and resources use, on a temporary profile."""
    monkeypatch.setenv("ELC_LIBRARY_DATABASE_PATH", str(test_db_path))
    reset_config()
    return get_library_state()


@pytest.fixture
def logged_in(app_state: LibraryState) -> LibraryState:
    app_state.login("T-100", "Dr. Test Admin")
    return app_state


# === MCP Context Fixtures ===


@pytest.fixture
def mock_context() -> Mock:
    """An MCP context whose client answers every sampling request."""
    context = Mock()
    context.sample = AsyncMock(
        return_value=TextContent(type="text", text="Try the Speakout Teacher's Books.")
    )
    return context


@pytest.fixture
def failing_context() -> Mock:
    """An MCP context whose sampling request fails in transport."""
    context = Mock()
    context.sample = AsyncMock(side_effect=ConnectionError("client went away"))
    return context
