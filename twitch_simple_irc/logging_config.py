r"""
Logging configuration module for the Twitch chat client.

Library code only emits records; applications call :func:`configure_logging`
(or use :class:`LoggerConfigurator` directly) to get colored console output
through the colorlog library.
"""

import logging
import os
import sys

import colorlog


class RawLineFilter(logging.Filter):
    """Filter suppressing raw protocol line records unless explicitly wanted."""

    def __init__(self, show_raw: bool = False) -> None:
        super().__init__()
        self.show_raw = show_raw

    def filter(self, record):
        """Return False for raw wire-line records when raw output is disabled."""
        if self.show_raw:
            return True
        return getattr(record, "event_name", None) != "dispatch_raw"


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional dict; recognised keys are ``level``, ``stream``
                and ``show_raw``.
        """
        self.config = config or {}

    def _resolve_level(self) -> int:
        if "level" in self.config:
            return int(self.config["level"])
        debug_env = os.environ.get("DEBUG", "").lower()
        return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

    def build_formatter(self) -> colorlog.ColoredFormatter:
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

    def configure(self) -> logging.Logger:
        """Attach a colored console handler to the package logger.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
        - TMI_SHOW_RAW: Set to 'true', '1', or 'yes' to keep raw line records
        """
        log_level = self._resolve_level()
        show_raw = self.config.get(
            "show_raw",
            os.environ.get("TMI_SHOW_RAW", "").lower() in ("true", "1", "yes"),
        )

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        handler.setFormatter(self.build_formatter())
        handler.addFilter(RawLineFilter(show_raw=show_raw))

        package_logger = logging.getLogger("twitch_simple_irc")
        # Replace handlers from a previous configure() call.
        for existing in list(package_logger.handlers):
            package_logger.removeHandler(existing)
        package_logger.addHandler(handler)
        package_logger.setLevel(log_level)
        package_logger.propagate = False

        # websockets logs every frame at DEBUG
        logging.getLogger("websockets").setLevel(logging.INFO)
        return package_logger


def configure_logging(level: int | None = None, **config) -> logging.Logger:
    """Configure colored console logging for the chat client."""
    if level is not None:
        config["level"] = level
    return LoggerConfigurator(config).configure()
