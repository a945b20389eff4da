"""
tabrunner/tabs/__init__.py

Tab commands and the registry exposed to the runner's dispatcher.
"""

from tabrunner.tabs.abstract_tab_manager import AbstractTabManager
from tabrunner.tabs.command_registry import build_tab_command_registry, dispatch_command
from tabrunner.tabs.tab_commands import TabCommands

__all__ = [
    "AbstractTabManager",
    "TabCommands",
    "build_tab_command_registry",
    "dispatch_command",
]
