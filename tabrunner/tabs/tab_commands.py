"""
tabrunner/tabs/tab_commands.py

Tab commands: tab creation, navigation and content script execution.

Contains:
- TabCommands: Runs content scripts in tabs, retrying across navigations and
  waiting for new pages, on top of an AbstractTabManager
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

from tabrunner.config import Config
from tabrunner.data_models.tabs import (
    CreateTabRequest,
    ExecutionMetadata,
    ExecutionOutcome,
    NavigateTabRequest,
    RunScriptRequest,
    WaitForNewPageRequest,
)
from tabrunner.tabs.abstract_tab_manager import AbstractTabManager
from tabrunner.utils.exceptions import (
    ContentScriptAbortedError,
    IllegalArgumentError,
    NewPageWaitTimeoutError,
)
from tabrunner.utils.logger import get_logger

logger = get_logger(name=__name__)

Delay = Callable[[float], Awaitable[Any]]
Clock = Callable[[], int]


async def sleep_ms(ms: float) -> None:
    """Default delay primitive."""
    await asyncio.sleep(ms / 1000)


def now_ms() -> int:
    """Default clock: milliseconds since the epoch."""
    return int(time.time() * 1000)


def _discard_result(future: asyncio.Future) -> None:
    # mark a detached observation's exception as retrieved so asyncio does not report it
    if not future.cancelled():
        future.exception()


class TabCommands:
    """
    Command implementations backed by a tab manager.

    Request records are built by `parse_request` (the command registry does
    that for raw parameters). Every command still checks that the addressed
    tab is live before calling the tab manager.
    """

    def __init__(
        self,
        tab_manager: AbstractTabManager,
        delay: Delay | None = None,
        clock: Clock | None = None,
        max_wait_attempts: int | None = Config.WAIT_MAX_ATTEMPTS,
    ) -> None:
        """
        Args:
            tab_manager: Owner of the tabs the commands operate on.
            delay: Awaitable factory that completes after the given milliseconds.
            clock: Returns the current time in milliseconds, used for metadata.
            max_wait_attempts: Cap on `wait` attempts; None retries for as long as runs abort.
        """
        if max_wait_attempts is not None and max_wait_attempts < 1:
            raise ValueError(f"max_wait_attempts must be at least 1, got {max_wait_attempts}")
        self.tab_manager = tab_manager
        self._delay = delay or sleep_ms
        self._clock = clock or now_ms
        self.max_wait_attempts = max_wait_attempts

    # Simple tab operations _______________________________________________________________________

    async def create_tab(self, request: CreateTabRequest | None = None) -> str:  # noqa: ARG002
        """
        Open a blank tab and return its id.

        Creating a tab has a lot of overhead, so no URL is accepted here. Navigation
        is a separate step that can happen inside a transaction block.
        """
        tab = await self.tab_manager.create_tab()
        logger.debug("Created tab %s", tab.id)
        return tab.id

    async def navigate_tab(self, request: NavigateTabRequest) -> Any:
        self._require_live_tab("tabs.navigate", request.id)
        return await self.tab_manager.navigate_tab(request.id, request.url)

    # Content script execution ____________________________________________________________________

    def _require_live_tab(self, command: str, tab_id: str) -> None:
        """Fail unless the tab is tracked; request records built outside `parse_request` were never checked."""
        if not self.tab_manager.has_tab(tab_id):
            raise IllegalArgumentError(f"{command}(): invalid argument `id`")

    async def _execute_once(
        self,
        tab_id: str,
        code: str,
        arg: Any,
        metadata: ExecutionMetadata,
    ) -> ExecutionOutcome:
        raw = await self.tab_manager.run_content_script(tab_id, code, arg=arg, metadata=metadata)
        return ExecutionOutcome.from_script_result(raw)

    async def run(self, request: RunScriptRequest) -> ExecutionOutcome:
        """
        Run a content script once.

        Every error propagates unmodified, including ContentScriptAbortedError.
        """
        self._require_live_tab("tabs.run", request.id)
        metadata = ExecutionMetadata(run_begin_time=self._clock())
        return await self._execute_once(request.id, request.code, request.arg, metadata)

    async def wait(self, request: RunScriptRequest) -> ExecutionOutcome:
        """
        Run a content script until it completes without being aborted by a navigation.

        Scripts that cause a navigation (e.g. by clicking a link) cannot report
        from a context that is being torn down, so an aborted run is repeated on
        the fresh page. The tab manager waits for that page inside
        `run_content_script`, which throttles the retries.

        Returns:
            The outcome of the first attempt that ran to completion.

        Raises:
            ContentScriptAbortedError: Only when `max_wait_attempts` is set and exhausted.
        """
        self._require_live_tab("tabs.wait", request.id)
        wait_begin_time = self._clock()
        attempt_number = 0
        while True:
            metadata = ExecutionMetadata(
                attempt_number=attempt_number,
                run_begin_time=self._clock(),
                wait_begin_time=wait_begin_time,
            )
            try:
                return await self._execute_once(request.id, request.code, request.arg, metadata)
            except ContentScriptAbortedError:
                if self.max_wait_attempts is not None and attempt_number + 1 >= self.max_wait_attempts:
                    raise
                logger.debug(
                    "Content script in tab %s aborted by navigation (attempt %d), retrying",
                    request.id, attempt_number,
                )
                attempt_number += 1

    async def wait_for_new_page(self, request: WaitForNewPageRequest) -> ExecutionOutcome:
        """
        Run a content script once, then wait for the tab to load a new page.

        The timeout does not start counting until the script has completed.

        Returns:
            `{"reject": value}` if the script rejected, otherwise `{"reject": None}`
            once new content is observed. A script's resolve value is never
            returned, because the navigation that follows may still fail.

        Raises:
            NewPageWaitTimeoutError: If no new content arrived within `timeout_ms` after the script.
        """
        self._require_live_tab("tabs.waitForNewPage", request.id)
        metadata = ExecutionMetadata(run_begin_time=self._clock())

        # observe before running the script, so a navigation caused by it cannot be missed
        observation = self.tab_manager.wait_for_new_content(request.id)
        owns_observation = not asyncio.isfuture(observation)
        new_content = asyncio.ensure_future(observation)
        try:
            try:
                outcome = await self._execute_once(request.id, request.code, request.arg, metadata)
            except ContentScriptAbortedError:
                # navigating away is what we are waiting for
                logger.debug("Content script in tab %s aborted by navigation", request.id)
            else:
                if outcome.is_rejected:
                    return outcome

            await self._race_new_content(new_content, request.timeout_ms)
        finally:
            self._release(new_content, owns_observation)

        return ExecutionOutcome.rejected(None)

    async def _race_new_content(self, new_content: asyncio.Future, timeout_ms: float) -> None:
        timer = asyncio.ensure_future(self._delay(timeout_ms))
        try:
            done, _ = await asyncio.wait({new_content, timer}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not timer.done():
                timer.cancel()

        if new_content in done:
            # surfaces a failed observation
            new_content.result()
            return

        timer.result()
        logger.debug("No new page within %s ms", timeout_ms)
        raise NewPageWaitTimeoutError(timeout_ms / 1000)

    @staticmethod
    def _release(new_content: asyncio.Future, owned: bool) -> None:
        """Drop an observation that is no longer awaited."""
        if new_content.done():
            _discard_result(new_content)
        elif owned:
            new_content.cancel()
        else:
            # the tab manager's future: detach rather than cancel it
            new_content.add_done_callback(_discard_result)
