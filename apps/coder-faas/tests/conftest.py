"""Fixtures for handler tests."""

import pytest

from coderfaas import FunctionRegistry, build_context, load_functions


@pytest.fixture(autouse=True)
def registered_functions():
    FunctionRegistry.clear()
    load_functions("functions")
    yield FunctionRegistry.get_all()
    FunctionRegistry.clear()


@pytest.fixture
def make_context(registered_functions):
    """Build a Context for a named function the way a host would."""

    def _make(name, method="GET", url=None, headers=None, query=None, body=None):
        meta = registered_functions[name]
        return build_context(
            meta,
            method,
            url or meta.http_trigger.path,
            headers or {"host": "localhost:8080"},
            query or {},
            body,
        )

    return _make
