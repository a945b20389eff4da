"""
tabrunner/utils/exceptions.py

Custom exceptions for the project.

Every error a tab command raises on purpose derives from ScriptError and carries
a stable `error_name` tag, so callers match on the class and dispatchers can
forward the tag without inspecting messages.
"""

from typing import Any, ClassVar


class ScriptError(Exception):
    """
    Base class for errors reported back to the runner script.
    """
    error_name: ClassVar[str] = "ScriptError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Serializable form for the dispatcher."""
        return {"name": self.error_name, "message": self.message}


class IllegalArgumentError(ScriptError):
    """
    Exception raised when command parameters fail validation.
    """
    error_name = "IllegalArgument"


class ContentScriptAbortedError(ScriptError):
    """
    Exception raised by a tab manager when the tab navigated away while a
    content script was running, destroying its execution context.
    """
    error_name = "ContentScriptAborted"

    def __init__(self, message: str = "Content script execution was aborted by a page navigation") -> None:
        super().__init__(message)


class NewPageWaitTimeoutError(ScriptError):
    """
    Exception raised when no new page appeared within the wait budget.
    """
    error_name = "NewPageWaitTimeout"

    def __init__(self, timeout_seconds: float) -> None:
        # whole seconds render without a trailing ".0", matching the runner's messages
        shown = int(timeout_seconds) if float(timeout_seconds).is_integer() else timeout_seconds
        super().__init__(f"Waiting for a new page timed out after {shown} seconds")
        self.timeout_seconds = timeout_seconds

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["timeoutSeconds"] = self.timeout_seconds
        return data


class UnknownCommandError(ScriptError):
    """
    Exception raised when a command name is not present in the registry.
    """
    error_name = "UnknownCommand"

    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown command: {command}")
        self.command = command
