"""
Conversation workflow built on a LangGraph StateGraph.

The graph is fixed: ``START -> DeepgramVoiceAgent -> localFunctions``, after which
the conversation loops back into ``localFunctions`` while the last message is a
FunctionCallRequest and ends otherwise. Every node returns a new message list;
the incoming list is never mutated.
"""

import logging
from typing import Any, Dict, List, TypedDict

from langgraph.graph import END, START, StateGraph

from deepgram_bridge.bot.voice_agent_client import VoiceAgentClient
from deepgram_bridge.config.constants import (
    EVENT_TEXT_RESPONSE,
    LOGGER_NAME,
    MESSAGE_TYPE_AI,
    MESSAGE_TYPE_FUNCTION_CALL_REQUEST,
    MESSAGE_TYPE_FUNCTION_CALL_RESPONSE,
    NODE_AGENT,
    NODE_LOCAL_FUNCTIONS,
)
from deepgram_bridge.handlers.function_registry import FunctionRegistry
from deepgram_bridge.models.conversation import ConversationMessage, normalize_messages

logger = logging.getLogger(LOGGER_NAME)


class WorkflowInputError(ValueError):
    """The workflow state does not satisfy a node's input contract."""


class EmptyInputError(WorkflowInputError):
    def __init__(self):
        super().__init__("No messages provided in state.")


class MissingContentError(WorkflowInputError):
    def __init__(self):
        super().__init__("Message content is missing.")


class WorkflowState(TypedDict):
    messages: List[ConversationMessage]


def should_continue(state: WorkflowState) -> str:
    """Route after localFunctions on the type of the last message."""
    last_message = state["messages"][-1]
    if last_message.type == MESSAGE_TYPE_FUNCTION_CALL_REQUEST:
        return NODE_LOCAL_FUNCTIONS
    return END


class ConversationWorkflow:
    """
    Threads a conversation through the agent node and the local functions node.

    The agent node delegates to the voice agent client (it surfaces the last
    message as a ``text_response`` event); the local functions node delegates to
    the shared function registry.
    """

    def __init__(self, agent: VoiceAgentClient, registry: FunctionRegistry):
        self.agent = agent
        self.registry = registry
        self.app = self._build_graph().compile()

    def _build_graph(self) -> StateGraph:
        graph = StateGraph(WorkflowState)
        graph.add_node(NODE_AGENT, self.agent_node)
        graph.add_node(NODE_LOCAL_FUNCTIONS, self.local_functions_node)
        graph.add_edge(START, NODE_AGENT)
        graph.add_edge(NODE_AGENT, NODE_LOCAL_FUNCTIONS)
        graph.add_conditional_edges(
            NODE_LOCAL_FUNCTIONS, should_continue, [NODE_LOCAL_FUNCTIONS, END]
        )
        return graph

    async def agent_node(self, state: WorkflowState) -> Dict[str, Any]:
        """Echo the last message's content as an ai message and a text_response event."""
        messages = state.get("messages") or []
        if not messages:
            raise EmptyInputError()

        content = messages[-1].content
        if not content:
            raise MissingContentError()

        self.agent.emit(EVENT_TEXT_RESPONSE, content)
        reply = ConversationMessage(type=MESSAGE_TYPE_AI, content=content, additional_kwargs={})
        return {"messages": [*messages, reply]}

    async def local_functions_node(self, state: WorkflowState) -> Dict[str, Any]:
        """Execute a pending FunctionCallRequest through the registry."""
        messages = state["messages"]
        last_message = messages[-1]
        if last_message.type != MESSAGE_TYPE_FUNCTION_CALL_REQUEST:
            return {"messages": messages}

        logger.info("Routing to localFunctions")
        kwargs = last_message.additional_kwargs or {}
        function_name = kwargs.get("function_name")
        output = await self.registry.invoke(function_name, kwargs.get("input"))

        response_kwargs = {"function_name": function_name}
        if kwargs.get("function_call_id") is not None:
            response_kwargs["function_call_id"] = kwargs["function_call_id"]
        response = ConversationMessage(
            type=MESSAGE_TYPE_FUNCTION_CALL_RESPONSE,
            output=output,
            additional_kwargs=response_kwargs,
        )
        return {"messages": [*messages, response]}

    async def invoke(self, messages: List[Any]) -> List[ConversationMessage]:
        """
        Run one workflow invocation.

        Args:
            messages: Initial sequence; mappings, LangChain messages or
                ConversationMessage instances

        Returns:
            The extended message sequence
        """
        final_state = await self.app.ainvoke({"messages": normalize_messages(messages)})
        return final_state["messages"]
