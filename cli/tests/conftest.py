"""Shared fixtures for CLI tests.

Every CLI invocation runs the global callback, which reconfigures the
root logger.  The handlers pytest installed are restored after each test
so that log capture keeps working across the suite.
"""

from __future__ import annotations

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    """Keep SQLSHIFT_* settings from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("SQLSHIFT_"):
            monkeypatch.delenv(key)
