"""
Unit tests for the LangGraph conversation workflow.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import HumanMessage
from langgraph.graph import END

from deepgram_bridge.bot.voice_agent_client import VoiceAgentClient
from deepgram_bridge.bot.workflow import (
    ConversationWorkflow,
    EmptyInputError,
    MissingContentError,
    WorkflowInputError,
    should_continue,
)
from deepgram_bridge.config.constants import EVENT_TEXT_RESPONSE, NODE_LOCAL_FUNCTIONS
from deepgram_bridge.handlers.function_registry import FunctionNotImplementedError
from deepgram_bridge.models.conversation import ConversationMessage


@pytest.fixture
def agent(session_config):
    return VoiceAgentClient("test-api-key", session_config)


@pytest.fixture
def workflow(agent, registry):
    return ConversationWorkflow(agent, registry)


def function_call_request(function_name="add_item", input=None):
    return ConversationMessage(
        type="FunctionCallRequest",
        additional_kwargs={
            "function_name": function_name,
            "input": input if input is not None else {"item": "Fries"},
        },
    )


@pytest.mark.asyncio
async def test_agent_node_appends_ai_message(workflow, agent):
    text_listener = MagicMock()
    agent.on(EVENT_TEXT_RESPONSE, text_listener)
    messages = [ConversationMessage(type="human", content="Hello")]

    result = await workflow.agent_node({"messages": messages})

    new_messages = result["messages"]
    assert len(new_messages) == 2
    assert new_messages[-1].type == "ai"
    assert new_messages[-1].content == "Hello"
    assert new_messages[-1].additional_kwargs == {}
    text_listener.assert_called_once_with("Hello")
    # the input sequence is left untouched
    assert len(messages) == 1


@pytest.mark.asyncio
async def test_agent_node_empty_input(workflow):
    with pytest.raises(EmptyInputError):
        await workflow.agent_node({"messages": []})


@pytest.mark.asyncio
async def test_agent_node_missing_content(workflow):
    with pytest.raises(MissingContentError) as exc_info:
        await workflow.agent_node({"messages": [ConversationMessage(type="human")]})
    assert isinstance(exc_info.value, WorkflowInputError)
    assert str(exc_info.value) == "Message content is missing."


@pytest.mark.asyncio
async def test_agent_node_reads_nested_content(workflow):
    nested = ConversationMessage.from_raw(
        {
            "lc": 1,
            "type": "constructor",
            "id": ["langchain_core", "messages", "HumanMessage"],
            "kwargs": {"content": "Hello from kwargs", "additional_kwargs": {}},
        }
    )

    result = await workflow.agent_node({"messages": [nested]})
    assert result["messages"][-1].content == "Hello from kwargs"


@pytest.mark.asyncio
async def test_local_functions_node_executes_request(workflow):
    messages = [ConversationMessage(type="human", content="add fries"), function_call_request()]

    result = await workflow.local_functions_node({"messages": messages})

    new_messages = result["messages"]
    assert len(new_messages) == len(messages) + 1
    assert new_messages[-1].type == "FunctionCallResponse"
    assert new_messages[-1].output == 'Item "Fries" added to the order.'
    assert new_messages[-1].additional_kwargs["function_name"] == "add_item"


@pytest.mark.asyncio
async def test_local_functions_node_uses_handler_output(agent, registry):
    handler = AsyncMock(return_value={"total": 3})
    registry.register("count_items", handler)
    workflow = ConversationWorkflow(agent, registry)
    request = ConversationMessage(
        type="FunctionCallRequest",
        additional_kwargs={"function_name": "count_items", "input": {}, "function_call_id": "call-9"},
    )

    result = await workflow.local_functions_node({"messages": [request]})

    handler.assert_awaited_once_with({})
    assert result["messages"][-1].output == {"total": 3}
    assert result["messages"][-1].additional_kwargs["function_call_id"] == "call-9"


@pytest.mark.asyncio
async def test_local_functions_node_unknown_function(workflow):
    messages = [function_call_request(function_name="remove_item")]

    with pytest.raises(FunctionNotImplementedError) as exc_info:
        await workflow.local_functions_node({"messages": messages})
    assert str(exc_info.value) == 'Function "remove_item" not implemented.'


@pytest.mark.asyncio
async def test_local_functions_node_passes_through(workflow):
    messages = [ConversationMessage(type="human", content="Hello")]
    result = await workflow.local_functions_node({"messages": messages})
    assert result["messages"] == messages


def test_should_continue():
    assert should_continue({"messages": [function_call_request()]}) == NODE_LOCAL_FUNCTIONS
    assert should_continue({"messages": [ConversationMessage(type="ai", content="Hi")]}) == END
    assert should_continue(
        {"messages": [ConversationMessage(type="FunctionCallResponse", output="ok")]}
    ) == END


@pytest.mark.asyncio
async def test_invoke_round_trip(workflow, agent):
    text_listener = MagicMock()
    agent.on(EVENT_TEXT_RESPONSE, text_listener)

    messages = await workflow.invoke([{"type": "human", "content": "Hello"}])

    assert len(messages) == 2
    assert messages[0].type == "human"
    assert messages[-1].type == "ai"
    assert messages[-1].content == "Hello"
    text_listener.assert_called_once_with("Hello")


@pytest.mark.asyncio
async def test_invoke_accepts_langchain_messages(workflow):
    seed = HumanMessage(content="Hello", additional_kwargs={"metadata": {"audioStream": True}})

    messages = await workflow.invoke([seed])

    assert messages[0].type == "human"
    assert messages[0].additional_kwargs == {"metadata": {"audioStream": True}}
    assert messages[-1].type == "ai"
    assert messages[-1].content == "Hello"


@pytest.mark.asyncio
async def test_invoke_ends_after_one_pass(workflow, registry):
    """The agent node turns a request into an ai message, so no function runs."""
    messages = await workflow.invoke(
        [
            {
                "type": "FunctionCallRequest",
                "content": "add fries",
                "additional_kwargs": {"function_name": "add_item", "input": {"item": "Fries"}},
            }
        ]
    )

    assert [m.type for m in messages] == ["FunctionCallRequest", "ai"]


@pytest.mark.asyncio
async def test_invoke_empty_input_propagates(workflow):
    with pytest.raises(EmptyInputError):
        await workflow.invoke([])
