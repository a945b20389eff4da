"""
tabrunner/config.py

Environment variable configuration.

Contains:
- Config: Centralized settings from environment variables
- LOG_LEVEL, NEW_PAGE_TIMEOUT_MS, WAIT_MAX_ATTEMPTS, etc.
"""

import logging
import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _optional_int(value: str | None) -> int | None:
    """Parse an optional integer environment variable; empty means unset."""
    if value is None or value.strip() == "":
        return None
    return int(value)


class Config():
    """
    Centralized configuration for environment variables.
    """

    # logging configuration
    LOG_LEVEL: int = logging.getLevelNamesMapping().get(
        os.getenv("LOG_LEVEL", "INFO").upper(),
        logging.INFO
    )
    LOG_DATE_FORMAT: str = os.getenv("LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "[%(asctime)s] %(levelname)s:%(name)s:%(message)s")

    # tabs.waitForNewPage budget when the caller does not pass timeoutMs
    NEW_PAGE_TIMEOUT_MS: float = float(os.getenv("TABRUNNER_NEW_PAGE_TIMEOUT_MS", "30000"))

    # tabs.wait retries on aborted executions; None keeps retrying without a cap
    WAIT_MAX_ATTEMPTS: int | None = _optional_int(os.getenv("TABRUNNER_WAIT_MAX_ATTEMPTS"))

    @classmethod
    def as_dict(cls) -> dict[str, Any]:
        """
        Return a dictionary of all UPPERCASE class attributes and their values.
        Return:
            dict[str, Any]: A dictionary of all UPPERCASE class attributes and their values.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if key.isupper()
        }
