import unittest
from unittest.mock import AsyncMock

import pytest

from deepgram_bridge.handlers.function_registry import FunctionNotImplementedError, FunctionRegistry
from deepgram_bridge.handlers.local_functions import ADD_ITEM_PARAMETERS, add_item, build_registry


class TestFunctionRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = FunctionRegistry()

    def test_register(self):
        handler = AsyncMock()
        returned = self.registry.register("lookup", handler, description="Look something up")

        self.assertIs(returned, handler)
        self.assertIn("lookup", self.registry)
        self.assertEqual(len(self.registry), 1)
        self.assertEqual(self.registry.names(), ["lookup"])

    def test_descriptors(self):
        self.registry.register("first", AsyncMock(), description="First")
        self.registry.register("second", AsyncMock(), parameters=ADD_ITEM_PARAMETERS)

        descriptors = self.registry.descriptors()
        self.assertEqual([d.name for d in descriptors], ["first", "second"])
        self.assertEqual(descriptors[0].description, "First")
        self.assertEqual(descriptors[0].parameters, {"type": "object", "properties": {}})
        self.assertEqual(descriptors[1].parameters, ADD_ITEM_PARAMETERS)

    def test_decorator_uses_function_name(self):
        @self.registry.function(description="Say hello")
        async def greet(input):
            return "hello"

        self.assertIn("greet", self.registry)
        self.assertEqual(self.registry.descriptors()[0].description, "Say hello")

    def test_register_invalid_parameters(self):
        with self.assertRaises(ValueError):
            self.registry.register("bad", AsyncMock(), parameters={"type": "string"})
        self.assertNotIn("bad", self.registry)

    def test_build_registry(self):
        registry = build_registry()
        self.assertEqual(registry.names(), ["add_item"])
        descriptor = registry.descriptors()[0]
        self.assertEqual(descriptor.description, "Add an item to an order.")
        self.assertEqual(descriptor.parameters["required"], ["item"])


@pytest.mark.asyncio
async def test_invoke_registered_handler():
    registry = FunctionRegistry()
    handler = AsyncMock(return_value="done")
    registry.register("do_it", handler)

    result = await registry.invoke("do_it", {"value": 1})

    assert result == "done"
    handler.assert_awaited_once_with({"value": 1})


@pytest.mark.asyncio
async def test_invoke_defaults_missing_input():
    registry = FunctionRegistry()
    handler = AsyncMock(return_value="done")
    registry.register("do_it", handler)

    await registry.invoke("do_it")
    handler.assert_awaited_once_with({})


@pytest.mark.asyncio
async def test_invoke_unknown_function():
    registry = FunctionRegistry()

    with pytest.raises(FunctionNotImplementedError) as exc_info:
        await registry.invoke("missing", {})

    assert exc_info.value.function_name == "missing"
    assert str(exc_info.value) == 'Function "missing" not implemented.'


@pytest.mark.asyncio
async def test_invoke_without_name():
    with pytest.raises(FunctionNotImplementedError):
        await FunctionRegistry().invoke(None, {})


@pytest.mark.asyncio
async def test_invoke_does_not_retry_failing_handler():
    registry = FunctionRegistry()
    handler = AsyncMock(side_effect=RuntimeError("handler failed"))
    registry.register("flaky", handler)

    with pytest.raises(RuntimeError):
        await registry.invoke("flaky", {})
    assert handler.await_count == 1


@pytest.mark.asyncio
async def test_add_item():
    assert await add_item({"item": "Fries"}) == 'Item "Fries" added to the order.'
