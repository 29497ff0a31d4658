"""
Deepgram Voice Agent bridge with a local function-calling workflow.

This application keeps a real-time duplex session open with the Deepgram Voice
Agent API, streams microphone audio to it, plays back the audio it returns and
executes the functions the agent asks for on the local machine.

Architecture Overview:
- A WebSocket client that sends the session settings, splits inbound frames into
  binary audio and JSON control messages, and publishes them as events
- A function registry shared by the wire-triggered function calls and the
  conversation workflow
- A LangGraph conversation workflow that threads a message list through an
  agent node and a local functions node
- PyAudio microphone capture and speaker playback with barge-in support

Key Components:
- bot: Voice agent client, event emitter and conversation workflow
- config: Constants, environment settings and logging setup
- handlers: Function registry and the local functions exposed to the agent
- models: Pydantic schemas for the agent protocol and conversation messages
- services: Microphone and speaker I/O
- main: Process orchestrator wiring all of the above together

Getting Started:
1. Set up environment variables (or a .env file):
   - DEEPGRAM_API_KEY: Your Deepgram API key
   - INPUT_SAMPLE_RATE / OUTPUT_SAMPLE_RATE: Audio rates (default 16000 / 48000)
   - MIC_DEVICE_INDEX / SPEAKER_DEVICE_INDEX: PyAudio device indexes
   - LOG_LEVEL: Logging level (default INFO)

2. Start a session:
   ```bash
   python run.py
   ```
"""
