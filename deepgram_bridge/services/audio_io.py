"""
Microphone capture and speaker playback using PyAudio.

Both classes deal in opaque 16-bit mono PCM byte buffers. The microphone runs a
PyAudio callback stream and hands each chunk to a caller supplied function; the
player writes queued buffers from a background thread so that stop() can drop
whatever has not been played yet.
"""

import logging
import queue
import threading
from typing import Callable, Optional

import pyaudio

from deepgram_bridge.config.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# Audio config
CHUNK = 1024
FORMAT = pyaudio.paInt16
CHANNELS = 1


class Microphone:
    """Continuous byte-stream producer backed by a PyAudio input stream."""

    def __init__(self, sample_rate: int, device_index: Optional[int] = None, chunk_size: int = CHUNK):
        self.sample_rate = sample_rate
        self.device_index = device_index
        self.chunk_size = chunk_size
        self.p = None
        self.stream = None
        self._on_chunk: Optional[Callable[[bytes], None]] = None

    def start(self, on_chunk: Callable[[bytes], None]) -> None:
        """Open the input stream and forward every chunk to ``on_chunk``."""
        self._on_chunk = on_chunk
        self.p = pyaudio.PyAudio()
        self.stream = self.p.open(
            format=FORMAT,
            channels=CHANNELS,
            rate=self.sample_rate,
            input=True,
            input_device_index=self.device_index,
            frames_per_buffer=self.chunk_size,
            stream_callback=self._callback,
        )
        self.stream.start_stream()
        logger.info("Microphone started.")

    def _callback(self, in_data, frame_count, time_info, status):
        """Runs on the PortAudio thread for every captured buffer."""
        try:
            if self._on_chunk and in_data:
                self._on_chunk(in_data)
        except Exception as e:
            logger.error(f"Microphone error: {e}")
        return (None, pyaudio.paContinue)

    def stop(self) -> None:
        if self.stream:
            try:
                self.stream.stop_stream()
                self.stream.close()
            except OSError as e:
                logger.error(f"Microphone error: {e}")
            self.stream = None
        if self.p:
            self.p.terminate()
            self.p = None
        logger.info("Microphone stopped.")


class AudioPlayer:
    """Audio sink with play(buffer) and an immediate stop() for barge-in."""

    def __init__(self, sample_rate: int, device_index: Optional[int] = None):
        self.sample_rate = sample_rate
        self.device_index = device_index
        self.p = None
        self.stream = None
        self.audio_queue: "queue.Queue[Optional[bytes]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._running = False

    def _ensure_started(self) -> None:
        if self._running:
            return
        self.p = pyaudio.PyAudio()
        self.stream = self.p.open(
            format=FORMAT,
            channels=CHANNELS,
            rate=self.sample_rate,
            output=True,
            output_device_index=self.device_index,
        )
        self._running = True
        self._thread = threading.Thread(target=self._playback_loop, daemon=True)
        self._thread.start()
        logger.debug("Audio player started")

    def play(self, buffer: bytes) -> None:
        """Queue a buffer for playback."""
        self._ensure_started()
        self.audio_queue.put(buffer)

    def stop(self) -> None:
        """Drop every buffer that has not been played yet."""
        dropped = 0
        while True:
            try:
                self.audio_queue.get_nowait()
                dropped += 1
            except queue.Empty:
                break
        logger.debug(f"Audio playback stopped, dropped {dropped} queued buffers")

    def _playback_loop(self) -> None:
        while self._running:
            try:
                buffer = self.audio_queue.get(timeout=0.5)
            except queue.Empty:
                continue
            if buffer is None:
                break
            try:
                self.stream.write(buffer)
            except OSError as e:
                logger.error(f"Error playing audio: {e}")

    def close(self) -> None:
        """Stop the playback thread and release the output device."""
        if not self._running:
            return
        self._running = False
        self.stop()
        self.audio_queue.put(None)
        if self._thread:
            self._thread.join(timeout=2)
        if self.stream:
            self.stream.stop_stream()
            self.stream.close()
            self.stream = None
        if self.p:
            self.p.terminate()
            self.p = None
        logger.debug("Audio player closed")
