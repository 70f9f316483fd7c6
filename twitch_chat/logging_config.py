r"""
Logging configuration for applications embedding the chat client.

Provides a colored console setup using the colorlog library. The client
itself only logs through ``twitch_chat.logs.logger``; nothing is printed
until an application calls ``LoggerConfigurator().configure()``.
"""

import logging
import os
import sys

import colorlog


class TokenRedactFilter(logging.Filter):
    """Mask anything that looks like an OAuth password line."""

    def filter(self, record):
        message = record.getMessage()
        if "oauth:" in message:
            record.msg = message.split("oauth:", 1)[0] + "oauth:***"
            record.args = None
        return True


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional dict; ``stream`` overrides the output stream.
        """
        self.config = config or {}

    def build_formatter(self):
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self):
        """Configure the ``twitch_chat`` logger with colored output.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
        """
        debug_env = os.environ.get("DEBUG", "").lower()
        log_level = logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        handler.setFormatter(self.build_formatter())
        handler.addFilter(TokenRedactFilter())

        chat_logger = logging.getLogger("twitch_chat")
        # Replace handlers from a previous configure() call
        for existing in list(chat_logger.handlers):
            if not isinstance(existing, logging.NullHandler):
                chat_logger.removeHandler(existing)
        chat_logger.addHandler(handler)
        chat_logger.setLevel(log_level)
        chat_logger.propagate = False
        return chat_logger
