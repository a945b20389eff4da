"""
tests/unit/test_config.py

Unit tests for environment configuration.
"""

import pytest

from tabrunner.config import Config, _optional_int


def test_as_dict_contains_settings() -> None:
    settings = Config.as_dict()
    assert {"LOG_LEVEL", "LOG_FORMAT", "NEW_PAGE_TIMEOUT_MS", "WAIT_MAX_ATTEMPTS"} <= set(settings)
    assert all(key.isupper() for key in settings)


@pytest.mark.parametrize("raw, expected", [
    (None, None),
    ("", None),
    ("  ", None),
    ("5", 5),
])
def test_optional_int(raw: str | None, expected: int | None) -> None:
    assert _optional_int(raw) == expected
