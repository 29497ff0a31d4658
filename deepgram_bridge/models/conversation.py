"""
Conversation message model for the local workflow.

Messages reach the workflow in two shapes: flat mappings (or LangChain message
objects) carrying ``type``, ``content`` and ``additional_kwargs`` directly, and
LangChain's serialized constructor form where those fields sit under ``kwargs``.
Both shapes are normalized here, once, when a message enters the workflow.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from deepgram_bridge.config.constants import MESSAGE_TYPE_AI, MESSAGE_TYPE_HUMAN

# Serialized LangChain constructor ids mapped to message types
CONSTRUCTOR_MESSAGE_TYPES = {
    "HumanMessage": MESSAGE_TYPE_HUMAN,
    "AIMessage": MESSAGE_TYPE_AI,
}


class ConversationMessage(BaseModel):
    """One entry of the append-only conversation sequence."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = Field(..., description="human, ai, FunctionCallRequest or FunctionCallResponse")
    content: Optional[Any] = None
    additional_kwargs: Dict[str, Any] = Field(default_factory=dict)
    output: Optional[Any] = None

    @model_validator(mode="before")
    @classmethod
    def lift_nested_kwargs(cls, data: Any) -> Any:
        """Read content and metadata from a nested ``kwargs`` mapping when present."""
        if not isinstance(data, dict) or not isinstance(data.get("kwargs"), dict):
            return data

        data = dict(data)
        nested = data.pop("kwargs")
        if not data.get("content"):
            data["content"] = nested.get("content")
        if not data.get("additional_kwargs"):
            data["additional_kwargs"] = nested.get("additional_kwargs") or {}

        if data.get("type") in (None, "constructor"):
            constructor_id = data.pop("id", None) or []
            name = constructor_id[-1] if constructor_id else None
            data["type"] = nested.get("type") or CONSTRUCTOR_MESSAGE_TYPES.get(name, name)
        return data

    @classmethod
    def from_raw(cls, message: Any) -> "ConversationMessage":
        """Normalize a mapping, LangChain message or ConversationMessage."""
        if isinstance(message, cls):
            return message
        return cls.model_validate(message, from_attributes=True)


def normalize_messages(messages: List[Any]) -> List[ConversationMessage]:
    """Normalize a caller-supplied sequence into conversation messages."""
    return [ConversationMessage.from_raw(message) for message in messages]
