"""Pytest configuration and fixtures."""

import logging
import os
import sys
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"
BIN_FIXTURE = FIXTURES / "bin_fixture.py"


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up per-run loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("cmdassert_")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def bin_fixture():
    """Build (argv, env) for running the fixture program with the given settings."""

    def _make(**settings: str) -> tuple[list[str], dict[str, str]]:
        env = dict(os.environ)
        for key in ("stdout", "stderr", "exit", "signal"):
            env.pop(key, None)
        env.update(settings)
        return [sys.executable, str(BIN_FIXTURE)], env

    return _make
