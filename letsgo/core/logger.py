"""
Centralized logging configuration and wrapper for the logging library.
"""

import logging
import sys
from typing import Optional

from letsgo.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s:     %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[94m",
        "INFO": "\033[92m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[95m",
    }
    RESET = "\033[0m"

    def format(self, record):
        log_message = super().format(record)
        color = self.COLORS.get(record.levelname, "")
        if not color:
            return log_message
        return log_message.replace(
            record.levelname, f"{color}{record.levelname}{self.RESET}", 1
        )


class LetsGoLogger:
    """Self-configuring application logger."""

    _initialized = False
    _default_logger: Optional[logging.Logger] = None

    @classmethod
    def _get_default_logger(cls) -> logging.Logger:
        if cls._default_logger is None:
            if not cls._initialized:
                cls._configure_root_logger()
                cls._initialized = True

            cls._default_logger = logging.getLogger("letsgo")
            if not cls._default_logger.handlers:
                cls._attach_handler(cls._default_logger)
        return cls._default_logger

    @classmethod
    def _configure_root_logger(cls) -> None:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
        logging.basicConfig(level=level)

        logging.getLogger("uvicorn").setLevel(logging.INFO)
        logging.getLogger("fastapi").setLevel(logging.INFO)

        fastapi_logger = logging.getLogger("fastapi")
        if not any(isinstance(h, logging.StreamHandler) for h in fastapi_logger.handlers):
            cls._attach_handler(fastapi_logger)

    @staticmethod
    def _attach_handler(logger: logging.Logger) -> None:
        # Own handler, so skip the root one to avoid duplicate lines
        logger.propagate = False
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColoredFormatter(LOG_FORMAT))
        logger.addHandler(handler)

    @classmethod
    def info(cls, message: str) -> None:
        cls._get_default_logger().info(message)

    @classmethod
    def warning(cls, message: str) -> None:
        cls._get_default_logger().warning(message)

    @classmethod
    def error(cls, message: str) -> None:
        cls._get_default_logger().error(message)

    @classmethod
    def debug(cls, message: str) -> None:
        cls._get_default_logger().debug(message)

    @classmethod
    def exception(cls, message: str) -> None:
        """Log an error together with the active traceback."""
        cls._get_default_logger().exception(message)

    @classmethod
    def get_fastapi_logger(cls) -> logging.Logger:
        """Get the FastAPI logger configured with our formatter."""
        if not cls._initialized:
            cls._configure_root_logger()
            cls._initialized = True
        return logging.getLogger("fastapi")
