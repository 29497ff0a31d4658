"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for protocol names, event names and default agent
settings so that the client, the workflow and the orchestrator agree on them.
"""

# Logger name used throughout the application
LOGGER_NAME = "deepgram_bridge"

# Logging defaults; LOG_LEVEL is read from the environment when logging is configured
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "deepgram_bridge.log"

# Deepgram Voice Agent endpoint
DEFAULT_AGENT_URL = "wss://agent.deepgram.com/agent"

# Audio defaults
DEFAULT_INPUT_SAMPLE_RATE = 16000
DEFAULT_OUTPUT_SAMPLE_RATE = 48000
AUDIO_ENCODING_LINEAR16 = "linear16"
AUDIO_CONTAINER_NONE = "none"

# Default agent models
DEFAULT_LISTEN_MODEL = "nova-2"
DEFAULT_SPEAK_MODEL = "aura-asteria-en"
DEFAULT_THINK_PROVIDER = "open_ai"
DEFAULT_THINK_MODEL = "gpt-4o"
DEFAULT_AGENT_INSTRUCTIONS = (
    "You are a helpful assistant you can add any items to an order when the user "
    "asks to 'add item' followed by the item name."
)

# Wire message type constants
MESSAGE_TYPE_SETTINGS_CONFIGURATION = "SettingsConfiguration"
MESSAGE_TYPE_FUNCTION_CALL_REQUEST = "FunctionCallRequest"
MESSAGE_TYPE_FUNCTION_CALL_RESPONSE = "FunctionCallResponse"
MESSAGE_TYPE_USER_STARTED_SPEAKING = "UserStartedSpeaking"

# Conversation message types
MESSAGE_TYPE_HUMAN = "human"
MESSAGE_TYPE_AI = "ai"

# Events emitted by the voice agent client
EVENT_AUDIO_RESPONSE = "audio_response"
EVENT_TEXT_RESPONSE = "text_response"
EVENT_FUNCTION_CALL_REQUEST = "function_call_request"
EVENT_STOP_AUDIO = "stop_audio"
EVENT_ERROR = "error"
EVENT_CLOSE = "close"

# Workflow node names
NODE_AGENT = "DeepgramVoiceAgent"
NODE_LOCAL_FUNCTIONS = "localFunctions"
