"""
Models module for the agent protocol and the conversation state.

Key components:
- agent_schemas: Pydantic models for the settings configuration, inbound control
  messages and outbound function responses.
- conversation: The conversation message model and its normalization.
"""

from deepgram_bridge.models.agent_schemas import (
    AgentSettings,
    AudioInputSettings,
    AudioOutputSettings,
    AudioSettings,
    ControlMessage,
    FunctionCallRequest,
    FunctionCallResponse,
    FunctionDescriptor,
    ListenSettings,
    SettingsConfiguration,
    SpeakSettings,
    ThinkProvider,
    ThinkSettings,
    UserStartedSpeaking,
)
from deepgram_bridge.models.conversation import ConversationMessage, normalize_messages
