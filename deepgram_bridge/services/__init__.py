"""
Services module for local audio devices.

Key components:
- audio_io: PyAudio Microphone (byte-stream source) and AudioPlayer (sink with
  play() and an immediate stop() for barge-in).
"""
