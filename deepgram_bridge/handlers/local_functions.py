"""
Local functions exposed to the voice agent.
"""

import logging
from typing import Any, Dict

from deepgram_bridge.config.constants import LOGGER_NAME
from deepgram_bridge.handlers.function_registry import FunctionRegistry

logger = logging.getLogger(LOGGER_NAME)

ADD_ITEM_PARAMETERS = {
    "type": "object",
    "properties": {
        "item": {
            "type": "string",
            "description": (
                "The name of the item that the user would like to order. "
                "The valid values are only those on the menu."
            ),
        },
    },
    "required": ["item"],
}


async def add_item(input: Dict[str, Any]) -> str:
    """Add an item to the current order."""
    item = input.get("item")
    logger.info(f"Adding item to order: {item}")
    return f'Item "{item}" added to the order.'


def build_registry() -> FunctionRegistry:
    """Create the registry with every local function the agent can call."""
    registry = FunctionRegistry()
    registry.register(
        "add_item",
        add_item,
        description="Add an item to an order.",
        parameters=ADD_ITEM_PARAMETERS,
    )
    return registry
