"""
Run script for starting the Deepgram Voice Agent bridge.

This script loads the environment, configures logging and starts a voice session
that streams the microphone to the Deepgram Voice Agent, plays its audio replies
and answers its function calls locally.

Usage:
    python run.py [--input-sample-rate RATE] [--output-sample-rate RATE]
                  [--mic-device INDEX] [--speaker-device INDEX] [--log-level LEVEL]
"""

import argparse
import asyncio
import sys

from deepgram_bridge.config import settings
from deepgram_bridge.config.logging_config import configure_logging
from deepgram_bridge.main import create_app

settings.load_environment()


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Start a Deepgram Voice Agent session with local functions"
    )
    parser.add_argument(
        "--input-sample-rate",
        type=int,
        default=settings.get_input_sample_rate(),
        help="Microphone sample rate (default: 16000 or INPUT_SAMPLE_RATE env var)",
    )
    parser.add_argument(
        "--output-sample-rate",
        type=int,
        default=settings.get_output_sample_rate(),
        help="Playback sample rate (default: 48000 or OUTPUT_SAMPLE_RATE env var)",
    )
    parser.add_argument(
        "--mic-device",
        type=int,
        default=settings.get_mic_device_index(),
        help="PyAudio input device index (default: system default or MIC_DEVICE_INDEX env var)",
    )
    parser.add_argument(
        "--speaker-device",
        type=int,
        default=settings.get_speaker_device_index(),
        help="PyAudio output device index (default: system default or SPEAKER_DEVICE_INDEX env var)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.get_log_level(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args()


def main():
    """Main entry point for starting a voice session."""
    args = parse_args()
    logger = configure_logging(args.log_level)

    api_key = settings.get_api_key()
    if not api_key:
        logger.error("DEEPGRAM_API_KEY environment variable not set")
        print("Error: DEEPGRAM_API_KEY environment variable is required")
        sys.exit(1)

    logger.info(f"Input sample rate: {args.input_sample_rate}")
    logger.info(f"Output sample rate: {args.output_sample_rate}")
    logger.info(f"Deepgram API key configured: {bool(api_key)}")

    app = create_app(
        api_key,
        input_sample_rate=args.input_sample_rate,
        output_sample_rate=args.output_sample_rate,
        mic_device_index=args.mic_device,
        speaker_device_index=args.speaker_device,
    )
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
