import logging
import os
import tempfile
import unittest
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

from deepgram_bridge.config.logging_config import configure_logging, resolve_level
from deepgram_bridge.config.settings import load_environment


class TestLoggingConfig(unittest.TestCase):
    def test_configure_logging(self):
        # Test that the function returns a logger
        logger = configure_logging("INFO")
        self.assertIsInstance(logger, logging.Logger)

        # Test that the logger has the correct name
        self.assertEqual(logger.name, "deepgram_bridge")

        # Test that the logger has the correct level
        self.assertEqual(logger.level, logging.INFO)

        # Test that the logger has the correct handlers and format
        self.assertGreaterEqual(len(logger.handlers), 1)  # At least one handler (console)
        handler = logger.handlers[0]  # Check first handler (should be console handler)
        self.assertIsInstance(handler, logging.StreamHandler)
        formatter = handler.formatter
        self.assertEqual(formatter._fmt, "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        self.assertFalse(logger.propagate)

    def test_level_override(self):
        logger = configure_logging("debug")
        self.assertEqual(logger.level, logging.DEBUG)

    def test_level_read_when_configured(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            logger = configure_logging()
        self.assertEqual(logger.level, logging.WARNING)

    def test_unknown_level_falls_back_to_info(self):
        self.assertEqual(resolve_level("LOUD"), logging.INFO)

    def test_level_from_dotenv_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            env_file = Path(tmp) / ".env"
            env_file.write_text("LOG_LEVEL=DEBUG\n")
            with patch.dict(os.environ, {}, clear=False):
                os.environ.pop("LOG_LEVEL", None)
                self.assertTrue(load_environment(env_file))
                logger = configure_logging()
        self.assertEqual(logger.level, logging.DEBUG)

    def test_reconfigure_replaces_handlers(self):
        configure_logging("INFO")
        logger = configure_logging("INFO")
        console_handlers = [
            h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler)
        ]
        self.assertEqual(len(console_handlers), 1)

    def test_file_logging_failure_keeps_console(self):
        with patch("deepgram_bridge.config.logging_config.LOG_DIR") as mock_dir:
            mock_dir.mkdir.side_effect = OSError("read-only file system")
            logger = configure_logging("INFO")
        self.assertEqual(len(logger.handlers), 1)


if __name__ == "__main__":
    unittest.main()
