"""
tabrunner/tabs/abstract_tab_manager.py

Abstract base class for the tab manager that owns browser tabs.

The command layer never drives the browser itself; it sequences calls against
this interface and interprets the results.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Mapping
from typing import Any

from tabrunner.data_models.tabs import ExecutionMetadata, ExecutionOutcome, Tab


class AbstractTabManager(ABC):
    """
    Owner of tab lifecycle, page navigation and content script injection.

    Implementations must raise ContentScriptAbortedError from
    `run_content_script` when a navigation destroys the script's execution
    context, and should wait for the replacement page to be ready before
    running a script again.
    """

    @abstractmethod
    async def create_tab(self) -> Tab:
        """Open a new blank tab and return it."""

    @abstractmethod
    def has_tab(self, tab_id: str) -> bool:
        """Whether `tab_id` refers to a tab that is currently tracked and alive."""

    @abstractmethod
    async def navigate_tab(self, tab_id: str, url: str) -> Any:
        """Navigate the tab to `url`; the result is returned to the caller unmodified."""

    @abstractmethod
    async def run_content_script(
        self,
        tab_id: str,
        code: str,
        *,
        arg: Any,
        metadata: ExecutionMetadata,
    ) -> ExecutionOutcome | Mapping[str, Any]:
        """
        Inject `code` into the tab's page and run it with `arg` and `metadata`.

        Returns:
            The script's outcome, either as an ExecutionOutcome or as a
            `{"resolve": ...}` / `{"reject": ...}` mapping.

        Raises:
            ContentScriptAbortedError: If the tab navigated away before the script finished.
        """

    @abstractmethod
    def wait_for_new_content(self, tab_id: str) -> Awaitable[Any]:
        """
        Start observing the tab for a newly loaded page.

        The observation must be registered before this method returns, so a
        navigation that happens right after the call is not missed. The
        returned awaitable completes once new content is available. Callers may
        stop awaiting it at any time; it must not depend on being awaited.
        """
