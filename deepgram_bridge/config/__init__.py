"""
Configuration module for the Deepgram Voice Agent bridge.

Key components:
- constants: Protocol message types, event names, default models and rates.
- settings: Environment-based settings and the builder for the settings
  configuration document sent when the agent connection opens.
- logging_config: Console and rotating file logging for the application logger.

Usage examples:
```python
from deepgram_bridge.config.constants import LOGGER_NAME, EVENT_STOP_AUDIO
from deepgram_bridge.config.logging_config import configure_logging
from deepgram_bridge.config.settings import build_session_configuration

logger = configure_logging()
config = build_session_configuration(registry.descriptors())
```
"""
