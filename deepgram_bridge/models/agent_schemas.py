"""
Pydantic models for the Deepgram Voice Agent WebSocket protocol.

This module defines the outbound settings document sent when a connection opens,
the inbound control messages the client recognizes, and the function response
sent back to the agent. Binary audio frames carry no envelope and have no model.
"""

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from deepgram_bridge.config.constants import (
    AUDIO_CONTAINER_NONE,
    AUDIO_ENCODING_LINEAR16,
    MESSAGE_TYPE_FUNCTION_CALL_REQUEST,
    MESSAGE_TYPE_FUNCTION_CALL_RESPONSE,
    MESSAGE_TYPE_SETTINGS_CONFIGURATION,
    MESSAGE_TYPE_USER_STARTED_SPEAKING,
)


class FrozenModel(BaseModel):
    """Base model for immutable configuration documents."""

    model_config = ConfigDict(frozen=True)


# Settings configuration
class AudioInputSettings(FrozenModel):
    """Encoding of the audio sent to the agent."""

    encoding: str = AUDIO_ENCODING_LINEAR16
    sample_rate: int = Field(..., gt=0, description="Microphone sample rate in Hz")


class AudioOutputSettings(FrozenModel):
    """Encoding of the audio the agent sends back."""

    encoding: str = AUDIO_ENCODING_LINEAR16
    sample_rate: int = Field(..., gt=0, description="Playback sample rate in Hz")
    container: str = AUDIO_CONTAINER_NONE


class AudioSettings(FrozenModel):
    input: AudioInputSettings
    output: AudioOutputSettings


class ListenSettings(FrozenModel):
    model: str


class SpeakSettings(FrozenModel):
    model: str


class ThinkProvider(FrozenModel):
    type: str


class FunctionDescriptor(FrozenModel):
    """A callable capability advertised to the agent."""

    name: str = Field(..., description="Name the agent uses in FunctionCallRequest")
    description: str = ""
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        description="JSON schema object describing the function input",
    )

    @field_validator("name")
    def validate_name(cls, v):
        """Validate that the function name is not empty."""
        if not v.strip():
            raise ValueError("Function name cannot be empty")
        return v

    @field_validator("parameters")
    def validate_parameters(cls, v):
        """Validate that parameters is a JSON schema object."""
        if v.get("type") != "object":
            raise ValueError("Function parameters must be a JSON schema of type 'object'")
        return v


class ThinkSettings(FrozenModel):
    provider: ThinkProvider
    model: str
    instructions: str
    functions: List[FunctionDescriptor] = Field(default_factory=list)


class AgentSettings(FrozenModel):
    listen: ListenSettings
    speak: SpeakSettings
    think: ThinkSettings


class SettingsConfiguration(FrozenModel):
    """Session configuration, sent once as the first frame of every connection."""

    type: Literal["SettingsConfiguration"] = MESSAGE_TYPE_SETTINGS_CONFIGURATION
    audio: AudioSettings
    agent: AgentSettings


# Inbound control messages
class ControlMessage(BaseModel):
    """Any JSON control message from the agent, discriminated by type."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., description="Message type identifier")


class FunctionCallRequest(ControlMessage):
    """The agent asks for a local function to be executed."""

    type: Literal["FunctionCallRequest"] = MESSAGE_TYPE_FUNCTION_CALL_REQUEST
    function_call_id: str = Field(..., description="Correlation id echoed in the response")
    function_name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class UserStartedSpeaking(ControlMessage):
    """The user began speaking; playback has to stop (barge-in)."""

    type: Literal["UserStartedSpeaking"] = MESSAGE_TYPE_USER_STARTED_SPEAKING


# Outbound responses
class FunctionCallResponse(BaseModel):
    """Result of a local function, correlated by function_call_id."""

    type: Literal["FunctionCallResponse"] = MESSAGE_TYPE_FUNCTION_CALL_RESPONSE
    function_call_id: str
    output: Any = None
