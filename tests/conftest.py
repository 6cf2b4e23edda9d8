# tests/conftest.py
"""Shared test setup for project."""

from collections.abc import Generator

import pytest

import bundlemap.logs as mod_logs
import bundlemap.meta as mod_meta
from bundlemap.constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_ENV_VERBOSE_LOGS
from tests.utils import DEFAULT_TEST_LOG_LEVEL
from tests.utils.log_fixtures import (
    direct_logger,
    module_logger,
)


# These fixtures are intentionally re-exported so pytest can discover them.
__all__ = [
    "direct_logger",
    "module_logger",
]


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_log_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell settings out of log-level and color resolution."""
    for var in (
        DEFAULT_ENV_LOG_LEVEL,
        f"{mod_meta.PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}",
        DEFAULT_ENV_VERBOSE_LOGS,
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Reset the app logger to DEFAULT_TEST_LOG_LEVEL around each test.

    The logger is a module-level singleton; CLI tests change its level.
    """
    logger = mod_logs.getAppLogger()
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)
    logger.enable_color = False
    yield
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)
