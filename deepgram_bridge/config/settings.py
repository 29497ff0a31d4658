"""
Environment-based settings and the agent settings configuration document.

Values are read from the process environment (optionally populated from a .env
file by load_environment()) when the functions here are called, so a test or a
command-line flag can override them before the configuration is built.
"""

import os
from pathlib import Path
from typing import List, Optional

import dotenv

from deepgram_bridge.config.constants import (
    DEFAULT_AGENT_INSTRUCTIONS,
    DEFAULT_AGENT_URL,
    DEFAULT_INPUT_SAMPLE_RATE,
    DEFAULT_LISTEN_MODEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_SAMPLE_RATE,
    DEFAULT_SPEAK_MODEL,
    DEFAULT_THINK_MODEL,
    DEFAULT_THINK_PROVIDER,
)
from deepgram_bridge.models.agent_schemas import (
    AgentSettings,
    AudioInputSettings,
    AudioOutputSettings,
    AudioSettings,
    FunctionDescriptor,
    ListenSettings,
    SettingsConfiguration,
    SpeakSettings,
    ThinkProvider,
    ThinkSettings,
)


def load_environment(env_path: Path = Path(".") / ".env") -> bool:
    """Load environment variables from a .env file if it exists."""
    if env_path.exists():
        return dotenv.load_dotenv(env_path)
    return False


def get_api_key() -> Optional[str]:
    return os.getenv("DEEPGRAM_API_KEY")


def get_agent_url() -> str:
    return os.getenv("DEEPGRAM_AGENT_URL", DEFAULT_AGENT_URL)


def get_input_sample_rate() -> int:
    return int(os.getenv("INPUT_SAMPLE_RATE", str(DEFAULT_INPUT_SAMPLE_RATE)))


def get_output_sample_rate() -> int:
    return int(os.getenv("OUTPUT_SAMPLE_RATE", str(DEFAULT_OUTPUT_SAMPLE_RATE)))


def _get_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return int(value)


def get_mic_device_index() -> Optional[int]:
    """PyAudio input device index; None selects the system default."""
    return _get_optional_int("MIC_DEVICE_INDEX")


def get_speaker_device_index() -> Optional[int]:
    """PyAudio output device index; None selects the system default."""
    return _get_optional_int("SPEAKER_DEVICE_INDEX")


def get_log_level() -> str:
    """Level name for the application logger, read at call time so .env values apply."""
    return os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL


def build_session_configuration(
    functions: List[FunctionDescriptor],
    input_sample_rate: Optional[int] = None,
    output_sample_rate: Optional[int] = None,
) -> SettingsConfiguration:
    """
    Build the settings document sent when the agent connection opens.

    Args:
        functions: Function descriptors advertised to the agent
        input_sample_rate: Microphone sample rate, defaults to INPUT_SAMPLE_RATE
        output_sample_rate: Playback sample rate, defaults to OUTPUT_SAMPLE_RATE

    Returns:
        SettingsConfiguration: The immutable configuration document
    """
    return SettingsConfiguration(
        audio=AudioSettings(
            input=AudioInputSettings(sample_rate=input_sample_rate or get_input_sample_rate()),
            output=AudioOutputSettings(sample_rate=output_sample_rate or get_output_sample_rate()),
        ),
        agent=AgentSettings(
            listen=ListenSettings(model=os.getenv("LISTEN_MODEL", DEFAULT_LISTEN_MODEL)),
            speak=SpeakSettings(model=os.getenv("SPEAK_MODEL", DEFAULT_SPEAK_MODEL)),
            think=ThinkSettings(
                provider=ThinkProvider(type=os.getenv("THINK_PROVIDER", DEFAULT_THINK_PROVIDER)),
                model=os.getenv("THINK_MODEL", DEFAULT_THINK_MODEL),
                instructions=os.getenv("AGENT_INSTRUCTIONS", DEFAULT_AGENT_INSTRUCTIONS),
                functions=functions,
            ),
        ),
    )
