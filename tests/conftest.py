"""Pytest hooks and fixtures."""

import pytest

from rpcstack.config import clear_settings_cache


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep RPCSTACK_* variables from the host out of every test."""
    for key in ("RPCSTACK_CONFIG", "RPCSTACK_INCLUDE_ERROR_STACK", "RPCSTACK_SANITIZE_ERROR_MESSAGES", "RPCSTACK_JSONRPC_VERSION"):
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
