"""
tests/conftest.py

Configuration for pytest.
"""

import itertools
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from tabrunner.data_models.tabs import ExecutionOutcome, Tab
from tabrunner.tabs.command_registry import build_tab_command_registry
from tabrunner.tabs.tab_commands import TabCommands


LIVE_TAB_ID = "tab-1"


@pytest.fixture
def live_tab_ids() -> set[str]:
    """Ids the mock tab manager reports as live."""
    return {LIVE_TAB_ID}


@pytest.fixture
def mock_tab_manager(live_tab_ids: set[str]) -> MagicMock:
    """
    Mock AbstractTabManager.

    All collaborators are attached to one parent mock, so `method_calls`
    records the order in which they were invoked.
    """
    manager = MagicMock()
    manager.create_tab = AsyncMock(return_value=Tab(id="tab-new"))
    manager.has_tab = MagicMock(side_effect=lambda tab_id: tab_id in live_tab_ids)
    manager.navigate_tab = AsyncMock(return_value={"navigated": True})
    manager.run_content_script = AsyncMock(return_value=ExecutionOutcome.resolved("done"))
    manager.wait_for_new_content = MagicMock()
    return manager


@pytest.fixture
def clock() -> Callable[[], int]:
    """Deterministic millisecond clock that advances by 10 ms per reading."""
    counter = itertools.count(start=1_000, step=10)
    return lambda: next(counter)


@pytest.fixture
def make_tab_commands(mock_tab_manager: MagicMock, clock: Callable[[], int]) -> Callable[..., TabCommands]:
    """
    Factory fixture to create TabCommands over the mock tab manager.

    Usage:
        tab_commands = make_tab_commands()
        tab_commands = make_tab_commands(delay=fake_delay, max_wait_attempts=3)
    """
    def factory(**kwargs) -> TabCommands:
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("max_wait_attempts", None)
        return TabCommands(mock_tab_manager, **kwargs)
    return factory


@pytest.fixture
def tab_commands(make_tab_commands: Callable[..., TabCommands]) -> TabCommands:
    return make_tab_commands()


@pytest.fixture
def registry(tab_commands: TabCommands):
    return build_tab_command_registry(tab_commands)
