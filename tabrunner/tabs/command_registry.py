"""
tabrunner/tabs/command_registry.py

Command name to handler mapping consumed by the runner's dispatcher.

Handlers take the raw parameter mapping sent by the runner script, validate it
into a request record and return a JSON-ready result.
"""

from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

from tabrunner.data_models.tabs import (
    CreateTabRequest,
    NavigateTabRequest,
    RunScriptRequest,
    WaitForNewPageRequest,
    parse_request,
)
from tabrunner.tabs.tab_commands import TabCommands
from tabrunner.utils.exceptions import UnknownCommandError

CommandHandler = Callable[[Mapping[str, Any] | None], Awaitable[Any]]


def build_tab_command_registry(tab_commands: TabCommands) -> Mapping[str, CommandHandler]:
    """
    Build the read-only `tabs.*` command table.

    Args:
        tab_commands: Command implementations to expose.

    Returns:
        Mapping from command name to async handler.
    """
    tab_manager = tab_commands.tab_manager

    async def create_tab(params: Mapping[str, Any] | None = None) -> str:
        # any extra fields, `url` included, are dropped here
        request = parse_request(CreateTabRequest, "tabs.create", params, tab_manager)
        return await tab_commands.create_tab(request)

    async def navigate_tab(params: Mapping[str, Any] | None = None) -> Any:
        request = parse_request(NavigateTabRequest, "tabs.navigate", params, tab_manager)
        return await tab_commands.navigate_tab(request)

    async def run(params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        request = parse_request(RunScriptRequest, "tabs.run", params, tab_manager)
        outcome = await tab_commands.run(request)
        return outcome.to_payload()

    async def wait(params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        request = parse_request(RunScriptRequest, "tabs.wait", params, tab_manager)
        outcome = await tab_commands.wait(request)
        return outcome.to_payload()

    async def wait_for_new_page(params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        request = parse_request(WaitForNewPageRequest, "tabs.waitForNewPage", params, tab_manager)
        outcome = await tab_commands.wait_for_new_page(request)
        return outcome.to_payload()

    return MappingProxyType({
        "tabs.create": create_tab,
        "tabs.navigate": navigate_tab,
        "tabs.run": run,
        "tabs.wait": wait,
        "tabs.waitForNewPage": wait_for_new_page,
    })


async def dispatch_command(
    registry: Mapping[str, CommandHandler],
    command: str,
    params: Mapping[str, Any] | None = None,
) -> Any:
    """
    Resolve `command` in `registry` and run its handler.

    Raises:
        UnknownCommandError: If no handler is registered under `command`.
    """
    handler = registry.get(command)
    if handler is None:
        raise UnknownCommandError(command)
    return await handler(params)
