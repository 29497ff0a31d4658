"""
Registry of local functions the agent may call.

A single FunctionRegistry instance is shared by the wire-triggered handler in the
orchestrator and by the workflow's local-functions node, so both resolve names
against the same table. The registry also produces the function descriptors that
are advertised to the agent in the settings configuration.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from deepgram_bridge.config.constants import LOGGER_NAME
from deepgram_bridge.models.agent_schemas import FunctionDescriptor

logger = logging.getLogger(LOGGER_NAME)

FunctionHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


class FunctionNotImplementedError(LookupError):
    """Raised when a function name has no registered handler."""

    def __init__(self, function_name: Optional[str]):
        self.function_name = function_name
        super().__init__(f'Function "{function_name}" not implemented.')


class FunctionRegistry:
    """Maps function names to async handlers and their descriptors."""

    def __init__(self):
        self._handlers: Dict[str, FunctionHandler] = {}
        self._descriptors: Dict[str, FunctionDescriptor] = {}

    def register(
        self,
        name: str,
        handler: FunctionHandler,
        description: str = "",
        parameters: Optional[Dict[str, Any]] = None,
    ) -> FunctionHandler:
        """
        Register a handler under a function name.

        Args:
            name: Function name the agent will use
            handler: Async callable receiving the input mapping
            description: Human readable description for the agent
            parameters: JSON schema of the input mapping

        Returns:
            The handler, unchanged
        """
        descriptor = FunctionDescriptor(
            name=name,
            description=description,
            **({"parameters": parameters} if parameters is not None else {}),
        )
        if name in self._handlers:
            logger.warning(f"Replacing handler for function: {name}")
        self._handlers[name] = handler
        self._descriptors[name] = descriptor
        logger.debug(f"Registered local function: {name}")
        return handler

    def function(
        self,
        name: Optional[str] = None,
        description: str = "",
        parameters: Optional[Dict[str, Any]] = None,
    ):
        """Decorator form of register(); the function name defaults to __name__."""

        def decorator(handler: FunctionHandler) -> FunctionHandler:
            return self.register(name or handler.__name__, handler, description, parameters)

        return decorator

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def names(self) -> List[str]:
        return list(self._handlers)

    def descriptors(self) -> List[FunctionDescriptor]:
        """Descriptors for every registered function, in registration order."""
        return list(self._descriptors.values())

    async def invoke(self, name: Optional[str], input: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run the handler registered under ``name``.

        Raises:
            FunctionNotImplementedError: If no handler is registered for ``name``
        """
        handler = self._handlers.get(name) if name is not None else None
        if handler is None:
            raise FunctionNotImplementedError(name)

        logger.info(f"Invoking local function: {name}")
        result = handler(input or {})
        if inspect.isawaitable(result):
            result = await result
        return result
