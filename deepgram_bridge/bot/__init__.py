"""
Bot module for the Deepgram Voice Agent session and the conversation workflow.

Key components:
- VoiceAgentClient: Client for the Deepgram Voice Agent WebSocket API. Sends the
  settings configuration on open, streams audio, and publishes inbound frames as
  audio_response, text_response, function_call_request, stop_audio, error and
  close events.
- ConversationWorkflow: LangGraph workflow running a message list through the
  agent node and the local functions node.

Usage examples:
```python
from deepgram_bridge.bot import ConversationWorkflow, VoiceAgentClient

agent = VoiceAgentClient(api_key, config)
agent.on("stop_audio", player.stop)
await agent.connect()

workflow = ConversationWorkflow(agent, registry)
messages = await workflow.invoke([{"type": "human", "content": "Hello"}])
```
"""

from deepgram_bridge.bot.voice_agent_client import ConnectionState, VoiceAgentClient
from deepgram_bridge.bot.workflow import ConversationWorkflow

__all__ = ["ConnectionState", "VoiceAgentClient", "ConversationWorkflow"]
