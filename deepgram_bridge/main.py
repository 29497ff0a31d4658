"""
Process orchestrator for the Deepgram Voice Agent bridge.

This module wires the voice agent client to the local audio devices, answers the
agent's function calls through the shared function registry, and drives the
initial invocation of the conversation workflow.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage
from pydantic import ValidationError

from deepgram_bridge.bot.voice_agent_client import VoiceAgentClient
from deepgram_bridge.bot.workflow import ConversationWorkflow
from deepgram_bridge.config import settings
from deepgram_bridge.config.constants import (
    EVENT_AUDIO_RESPONSE,
    EVENT_CLOSE,
    EVENT_ERROR,
    EVENT_FUNCTION_CALL_REQUEST,
    EVENT_STOP_AUDIO,
    EVENT_TEXT_RESPONSE,
    LOGGER_NAME,
)
from deepgram_bridge.config.logging_config import configure_logging
from deepgram_bridge.handlers.function_registry import FunctionNotImplementedError, FunctionRegistry
from deepgram_bridge.handlers.local_functions import build_registry
from deepgram_bridge.models.agent_schemas import FunctionCallRequest

logger = logging.getLogger(LOGGER_NAME)


def _log_send_failure(future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Error sending microphone audio: {error}")


def initial_messages():
    """Seed sequence for the first workflow invocation."""
    return [
        HumanMessage(
            content="Hello",
            additional_kwargs={"metadata": {"audioStream": True}},
        )
    ]


class VoiceAgentApp:
    """Connects the agent session, audio devices, registry and workflow."""

    def __init__(self, agent: VoiceAgentClient, registry: FunctionRegistry, player, microphone=None):
        self.agent = agent
        self.registry = registry
        self.player = player
        self.microphone = microphone
        self.workflow = ConversationWorkflow(agent, registry)
        self._loop: Optional[asyncio.AbstractEventLoop] = None

        agent.on(EVENT_FUNCTION_CALL_REQUEST, self.handle_function_call_request)
        agent.on(EVENT_TEXT_RESPONSE, self.handle_text_response)
        agent.on(EVENT_AUDIO_RESPONSE, self.handle_audio_response)
        agent.on(EVENT_STOP_AUDIO, self.handle_stop_audio)
        agent.on(EVENT_ERROR, self.handle_error)
        agent.on(EVENT_CLOSE, self.handle_close)

    async def handle_function_call_request(self, message: Dict[str, Any]) -> None:
        """Run the requested local function and answer the agent over the wire."""
        try:
            request = FunctionCallRequest.model_validate(message)
        except ValidationError as e:
            logger.error(f"Invalid FunctionCallRequest: {e}")
            return

        try:
            output = await self.registry.invoke(request.function_name, request.input)
        except FunctionNotImplementedError as e:
            logger.error(str(e))
            return
        except Exception as e:
            logger.error(f'Error executing local function "{request.function_name}": {e}', exc_info=True)
            return

        await self.agent.send_function_call_response(request.function_call_id, output)

    def handle_text_response(self, response: Any) -> None:
        logger.info(f"Agent text response: {response}")

    def handle_audio_response(self, audio: bytes) -> None:
        try:
            self.player.play(audio)
        except Exception as e:
            logger.error(f"Error playing audio: {e}")

    def handle_stop_audio(self) -> None:
        logger.info("Stopping audio playback.")
        self.player.stop()

    def handle_error(self, error: Any) -> None:
        logger.error(f"Agent error: {error}")

    def handle_close(self) -> None:
        logger.info("Agent connection closed")

    def forward_audio(self, chunk: bytes) -> None:
        """Hand a microphone chunk (from the capture thread) to the event loop."""
        if self._loop is None or self._loop.is_closed():
            return
        future = asyncio.run_coroutine_threadsafe(self.agent.send_audio(chunk), self._loop)
        future.add_done_callback(_log_send_failure)

    async def run_workflow(self, messages=None):
        """Invoke the workflow once, logging instead of raising on failure."""
        try:
            final_messages = await self.workflow.invoke(
                messages if messages is not None else initial_messages()
            )
        except Exception as e:
            logger.error(f"Error executing workflow: {e}", exc_info=True)
            return None
        logger.info(f"Workflow execution completed: {[m.model_dump() for m in final_messages]}")
        return final_messages

    async def run(self) -> None:
        """Connect, stream the microphone, run the workflow, wait for the session to end."""
        self._loop = asyncio.get_running_loop()
        await self.agent.connect()

        if self.microphone is not None:
            try:
                self.microphone.start(self.forward_audio)
            except OSError as e:
                logger.error(f"Microphone error: {e}")

        try:
            await self.run_workflow()
            await self.agent.wait_closed()
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        if self.microphone is not None:
            self.microphone.stop()
        close_player = getattr(self.player, "close", None)
        if close_player:
            close_player()
        await self.agent.close()


def create_app(
    api_key: str,
    input_sample_rate: Optional[int] = None,
    output_sample_rate: Optional[int] = None,
    mic_device_index: Optional[int] = None,
    speaker_device_index: Optional[int] = None,
) -> VoiceAgentApp:
    """Build the registry, client, audio devices and app from settings."""
    from deepgram_bridge.services.audio_io import AudioPlayer, Microphone

    input_rate = input_sample_rate or settings.get_input_sample_rate()
    output_rate = output_sample_rate or settings.get_output_sample_rate()

    registry = build_registry()
    config = settings.build_session_configuration(
        registry.descriptors(),
        input_sample_rate=input_rate,
        output_sample_rate=output_rate,
    )
    agent = VoiceAgentClient(api_key, config, url=settings.get_agent_url())
    player = AudioPlayer(
        output_rate,
        speaker_device_index if speaker_device_index is not None else settings.get_speaker_device_index(),
    )
    microphone = Microphone(
        input_rate,
        mic_device_index if mic_device_index is not None else settings.get_mic_device_index(),
    )
    return VoiceAgentApp(agent, registry, player, microphone)


def main() -> None:
    settings.load_environment()
    configure_logging()

    api_key = settings.get_api_key()
    if not api_key:
        logger.error("DEEPGRAM_API_KEY environment variable not set")
        sys.exit(1)

    app = create_app(api_key)
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
