"""Structured logging utilities with context management."""

import contextvars
import sys
from typing import Any

from loguru import logger

from src.config import LoggingConfig


# Context variables for maintaining rule context
rule_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("rule_context", default={})


class LoggingContext:
    """
    Context manager for structured logging with automatic context injection.

    Example:
        with LoggingContext(rule_name="Cold engine revving"):
            logger.info("Evaluating")  # Will include rule_name
    """

    def __init__(self, **context_data):
        """
        Initialize logging context.

        Args:
            **context_data: Key-value pairs to add to logging context
        """
        self.context_data = context_data
        self.token = None

    def __enter__(self):
        """Enter context and set context variables."""
        current = rule_context.get().copy()
        current.update(self.context_data)

        self.token = rule_context.set(current)

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context and restore previous context."""
        if self.token:
            rule_context.reset(self.token)


def get_logging_context() -> dict[str, Any]:
    """
    Get current logging context.

    Returns:
        Dictionary of current context variables
    """
    return rule_context.get().copy()


def context_filter(record) -> bool:
    """Add context variables to log record."""
    for key, value in rule_context.get().items():
        record["extra"][key] = value

    return True


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure loguru to include context variables in all log messages.

    This should be called once at application startup.
    """
    config = config or LoggingConfig()

    logger.remove()
    logger.configure(extra={"rule_name": "-"})

    logger.add(
        sink=sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[rule_name]}</cyan> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        filter=context_filter,
        level=config.level,
        colorize=True,
    )

    if config.file:
        logger.add(
            sink=config.file,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra} | {name}:{function}:{line} | {message}",
            filter=context_filter,
            level="INFO",
            rotation=config.rotation,
            retention=config.retention,
            compression=config.compression,
            serialize=False,
        )
