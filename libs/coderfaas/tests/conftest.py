"""Shared fixtures for coderfaas tests."""

import pytest

from coderfaas import FunctionRegistry


@pytest.fixture(autouse=True)
def clean_registry():
    """Start and finish every test with an empty function registry."""
    FunctionRegistry.clear()
    yield
    FunctionRegistry.clear()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove coderfaas settings inherited from the outer environment."""
    for var in ("HOST", "PORT", "CODERFAAS_FUNCTION", "CODERFAAS_CONFIG", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
