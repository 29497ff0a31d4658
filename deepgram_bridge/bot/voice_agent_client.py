import asyncio
import enum
import json
import logging
import traceback
from typing import Any, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedError

from deepgram_bridge.bot.events import EventEmitter
from deepgram_bridge.config.constants import (
    DEFAULT_AGENT_URL,
    EVENT_AUDIO_RESPONSE,
    EVENT_CLOSE,
    EVENT_ERROR,
    EVENT_FUNCTION_CALL_REQUEST,
    EVENT_STOP_AUDIO,
    EVENT_TEXT_RESPONSE,
    LOGGER_NAME,
    MESSAGE_TYPE_FUNCTION_CALL_REQUEST,
    MESSAGE_TYPE_USER_STARTED_SPEAKING,
)
from deepgram_bridge.models.agent_schemas import FunctionCallResponse, SettingsConfiguration

logger = logging.getLogger(LOGGER_NAME)

# WebSocket configuration
WS_MAX_SIZE = 16 * 1024 * 1024  # 16MB - large enough for audio chunks


class ConnectionState(str, enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class VoiceAgentClient(EventEmitter):
    """
    Client for the Deepgram Voice Agent WebSocket API.

    Owns a single connection. Binary frames are surfaced as ``audio_response``
    events; text frames are parsed as JSON and dispatched by their ``type``:
    ``FunctionCallRequest`` -> ``function_call_request``, ``UserStartedSpeaking``
    -> ``stop_audio`` and anything else -> ``text_response``. Errors and closes are
    surfaced as ``error`` / ``close`` events and never retried; reconnecting is
    up to the caller.
    """

    def __init__(self, api_key: str, config: SettingsConfiguration, url: str = DEFAULT_AGENT_URL):
        super().__init__()
        self.api_key = api_key
        self.config = config
        self.url = url
        self.ws = None
        self.state = ConnectionState.IDLE
        self._recv_task: Optional[asyncio.Task] = None
        self._closed_event = asyncio.Event()
        logger.info(f"VoiceAgentClient initialized for {url}")

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN and self.ws is not None

    async def connect(self) -> bool:
        """
        Open a connection to the agent, closing any existing one first.

        The settings configuration is sent before the connection is marked open,
        so it is always the first outbound frame.

        Returns:
            bool: True if the connection was opened, False otherwise
        """
        if self.ws is not None:
            await self._teardown()

        self.state = ConnectionState.CONNECTING
        self._closed_event.clear()
        headers = {"Authorization": f"token {self.api_key}"}

        try:
            logger.info(f"Connecting to Deepgram Agent at {self.url}")
            logger.debug("Using headers: Authorization: token [API_KEY_HIDDEN]")
            ws = await websockets.connect(
                self.url,
                additional_headers=headers,
                max_size=WS_MAX_SIZE,
            )
        except Exception as e:
            logger.error(f"Failed to connect to Deepgram Agent: {e}")
            logger.debug(f"Connection error details: {traceback.format_exc()}")
            self._mark_closed()
            self.emit(EVENT_ERROR, f"WebSocket Error: {e}")
            return False

        self.ws = ws
        logger.info("Connected to Deepgram Agent")

        try:
            await ws.send(self.config.model_dump_json())
        except ConnectionClosed as e:
            logger.error(f"Connection closed while sending settings: {e}")
            self.ws = None
            self._mark_closed()
            self.emit(EVENT_ERROR, f"WebSocket Error: {e}")
            self.emit(EVENT_CLOSE)
            return False
        logger.debug("Sent settings configuration")

        self.state = ConnectionState.OPEN
        self._recv_task = asyncio.create_task(self._recv_loop(ws))
        return True

    async def reconnect(self) -> bool:
        """Replace the current connection with a fresh one."""
        logger.info("Reconnecting to Deepgram Agent")
        return await self.connect()

    async def send_audio(self, chunk: bytes) -> bool:
        """
        Send a raw audio chunk if the connection is open.

        Chunks produced while the connection is not open are dropped.

        Returns:
            bool: True if the chunk was handed to the socket
        """
        if not self.is_open:
            logger.debug(f"Dropping audio chunk of {len(chunk)} bytes - connection not open")
            return False
        return await self._send(chunk)

    async def send_function_call_response(self, function_call_id: str, output: Any) -> bool:
        """
        Answer a FunctionCallRequest with the local function's output.

        Returns:
            bool: True if the response was handed to the socket
        """
        if not self.is_open:
            logger.warning(f"Dropping response for function call {function_call_id} - connection not open")
            return False
        response = FunctionCallResponse(function_call_id=function_call_id, output=output)
        logger.debug(f"Sending FunctionCallResponse for {function_call_id}")
        return await self._send(response.model_dump_json())

    async def _send(self, payload: Union[bytes, str]) -> bool:
        ws = self.ws
        try:
            await ws.send(payload)
            return True
        except ConnectionClosed as e:
            logger.warning(f"Connection closed while sending: {e}")
            if self.ws is ws:
                self.ws = None
                self._mark_closed()
                self.emit(EVENT_CLOSE)
            return False

    async def _recv_loop(self, ws) -> None:
        """Read frames in arrival order until the connection closes."""
        try:
            async for message in ws:
                self._dispatch(message)
        except ConnectionClosedError as e:
            logger.warning(f"Connection closed unexpectedly: {e}")
            self.emit(EVENT_ERROR, f"WebSocket Error: {e}")
        except OSError as e:
            logger.error(f"Error in receive loop: {e}")
            self.emit(EVENT_ERROR, f"WebSocket Error: {e}")
        except Exception as e:
            logger.error(f"Receive loop stopped: {e}", exc_info=True)
            self.emit(EVENT_ERROR, f"WebSocket Error: {e}")
        finally:
            if self.ws is ws:
                logger.info("WebSocket connection closed.")
                self.ws = None
                self._mark_closed()
                try:
                    await ws.close()
                except Exception as e:
                    logger.warning(f"Error closing WebSocket: {e}")
                self.emit(EVENT_CLOSE)

    def _dispatch(self, message: Union[bytes, str]) -> None:
        """Classify one inbound frame and emit the matching event."""
        if isinstance(message, (bytes, bytearray)):
            logger.debug(f"Received audio chunk of {len(message)} bytes")
            self.emit(EVENT_AUDIO_RESPONSE, message)
            return

        try:
            data = json.loads(message)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Received invalid JSON: {message[:100]}")
            self.emit(EVENT_ERROR, f"Invalid JSON message: {e}")
            return

        message_type = data.get("type") if isinstance(data, dict) else None
        if message_type == MESSAGE_TYPE_FUNCTION_CALL_REQUEST:
            logger.info(f"Emitting FunctionCallRequest: {data}")
            self.emit(EVENT_FUNCTION_CALL_REQUEST, data)
        elif message_type == MESSAGE_TYPE_USER_STARTED_SPEAKING:
            logger.info("User started speaking. Stopping audio playback.")
            self.emit(EVENT_STOP_AUDIO)
        else:
            self.emit(EVENT_TEXT_RESPONSE, data)

    async def _teardown(self) -> None:
        """Cancel the receive loop and close the current socket."""
        ws, self.ws = self.ws, None
        task, self._recv_task = self._recv_task, None

        if task and not task.done():
            logger.debug("Cancelling existing receive task")
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                logger.debug("Previous receive task cancelled successfully")

        if ws is not None:
            try:
                logger.debug("Closing existing WebSocket connection")
                await ws.close()
            except Exception as e:
                logger.warning(f"Error closing existing WebSocket: {e}")

    def _mark_closed(self) -> None:
        self.state = ConnectionState.CLOSED
        self._closed_event.set()

    async def close(self) -> None:
        """Close the connection. Nothing is reopened until connect() is called."""
        logger.info("Closing Deepgram Agent client")
        was_connected = self.ws is not None
        await self._teardown()
        self._mark_closed()
        if was_connected:
            self.emit(EVENT_CLOSE)

    async def wait_closed(self) -> None:
        """Wait until the session reaches the closed state."""
        await self._closed_event.wait()
