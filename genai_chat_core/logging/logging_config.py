"""Centralized logging configuration for GenAI Chat Core.

@public

Supports YAML-based configuration and programmatic setup with sensible
defaults.

Usage:
    >>> from genai_chat_core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Chat created")

Environment variables:
    GENAI_LOGGING_CONFIG: Path to custom logging.yml
    GENAI_LOG_LEVEL: Default log level (INFO, DEBUG, etc.)
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Default log levels for different components
DEFAULT_LOG_LEVELS = {
    "genai_chat_core": "INFO",
    "genai_chat_core.llm": "INFO",
    "genai_chat_core._llm_core": "INFO",
}


class LoggingConfig:
    """Manages logging configuration for the library.

    @public

    Configuration precedence:
        1. Explicit config_path parameter
        2. GENAI_LOGGING_CONFIG environment variable
        3. Default configuration

    Example:
        >>> config = LoggingConfig()
        >>> config.apply()
        >>>
        >>> config = LoggingConfig(Path("custom_logging.yml"))
        >>> config.apply()

    Note:
        Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config: Optional[Dict[str, Any]] = None

    @staticmethod
    def _get_default_config_path() -> Optional[Path]:
        """Get config path from GENAI_LOGGING_CONFIG, or None for defaults."""
        if env_path := os.environ.get("GENAI_LOGGING_CONFIG"):
            return Path(env_path)
        return None

    def load_config(self) -> Dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary in logging.config.dictConfig format. Cached after
            the first call; create a new LoggingConfig to reload from disk.
        """
        if self._config is None:
            if self.config_path and self.config_path.exists():
                with open(self.config_path, "r") as f:
                    self._config = yaml.safe_load(f)
            else:
                self._config = self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get default logging configuration.

        Default format:
            "HH:MM:SS.mmm | LEVEL | logger.name - message"

        GENAI_LOG_LEVEL overrides the package log level.
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
                "detailed": {
                    "format": (
                        "%(asctime)s | %(levelname)-7s | %(name)s | "
                        "%(funcName)s:%(lineno)d - %(message)s"
                    ),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "genai_chat_core": {
                    "level": os.environ.get("GENAI_LOG_LEVEL", "INFO"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self):
        """Apply the configuration with logging.config.dictConfig.

        Multiple calls reconfigure logging.
        """
        logging.config.dictConfig(self.load_config())


# Global configuration instance
_logging_config: Optional[LoggingConfig] = None


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Setup logging for the library.

    @public

    Args:
        config_path: Optional path to YAML logging configuration file.
                    If None, uses environment variables or defaults.
        level: Optional log level override (INFO, DEBUG, WARNING, etc.).

    Example:
        >>> setup_logging()
        >>> setup_logging(level="DEBUG")
        >>> setup_logging(Path("custom.yml"), level="WARNING")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for library components.

    @public

    Initializes logging with the default configuration on first use.

    Args:
        name: Logger name, typically __name__.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Resolved citation", extra={"url": url})
    """
    if _logging_config is None:
        setup_logging()

    return logging.getLogger(name)
