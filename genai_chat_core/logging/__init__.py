"""Logging infrastructure for GenAI Chat Core.

@public

Key components:
    get_logger: Factory function for creating library loggers
    setup_logging: Initialize logging configuration from YAML or defaults
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from genai_chat_core.logging import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing started")

Note:
    Modules in this package obtain loggers via get_logger() so that the
    default configuration is applied before the first record is emitted.
"""

from .logging_config import LoggingConfig, get_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
