"""Tests for coderfaas decorators and the function registry."""

import asyncio

import pytest

from coderfaas import FunctionRegistry, http_trigger, serverless
from coderfaas.types import DuplicateFunctionError, FunctionMetadata


class TestServerless:
    def test_registers_function(self):
        @serverless(name="greeter", namespace="faas", timeout=5)
        async def greet(context):
            return "hi"

        meta = FunctionRegistry.get("greeter")
        assert meta is not None
        assert meta.handler is greet
        assert meta.namespace == "faas"
        assert meta.timeout == 5
        assert meta.module == __name__

    def test_name_defaults_to_function_name(self):
        @serverless
        async def plain(context):
            return None

        assert FunctionRegistry.list_names() == ["plain"]

    def test_returns_handler_unchanged(self):
        async def original(context):
            return None

        decorated = serverless(name="unchanged")(original)
        assert decorated is original
        assert asyncio.iscoroutinefunction(decorated)

    def test_metadata_attached_to_function(self):
        @serverless(name="tagged", labels={"team": "platform"}, environment={"A": "1"})
        async def tagged(context):
            return None

        meta = tagged._coderfaas_function
        assert isinstance(meta, FunctionMetadata)
        assert meta.labels == {"team": "platform"}
        assert meta.environment == {"A": "1"}

    def test_no_trigger_without_http_trigger(self):
        @serverless(name="bare")
        async def bare(context):
            return None

        assert FunctionRegistry.get("bare").http_trigger is None


class TestHttpTrigger:
    def test_trigger_recorded_on_registration(self):
        @serverless(name="routed")
        @http_trigger(path="/routed", methods=["get", "post"])
        async def routed(context):
            return None

        trigger = FunctionRegistry.get("routed").http_trigger
        assert trigger.path == "/routed"
        assert trigger.methods == ["GET", "POST"]

    def test_default_methods(self):
        @serverless(name="defaults")
        @http_trigger(path="/d")
        async def defaults(context):
            return None

        assert FunctionRegistry.get("defaults").http_trigger.methods == ["GET", "POST"]


class TestFunctionRegistry:
    def _meta(self, name, module="mod_a"):
        async def handler(context):
            return None

        return FunctionMetadata(name=name, handler=handler, module=module)

    def test_get_all_returns_copy(self):
        FunctionRegistry.register(self._meta("one"))
        everything = FunctionRegistry.get_all()
        everything.clear()
        assert FunctionRegistry.get("one") is not None

    def test_duplicate_name_from_other_module_rejected(self):
        FunctionRegistry.register(self._meta("dup", module="mod_a"))
        with pytest.raises(DuplicateFunctionError):
            FunctionRegistry.register(self._meta("dup", module="mod_b"))

    def test_reregistering_from_same_module_replaces(self):
        FunctionRegistry.register(self._meta("same"))
        replacement = self._meta("same")
        FunctionRegistry.register(replacement)
        assert FunctionRegistry.get("same") is replacement

    def test_clear(self):
        FunctionRegistry.register(self._meta("gone"))
        FunctionRegistry.clear()
        assert FunctionRegistry.list_names() == []
