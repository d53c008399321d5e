"""structlog configuration shared by the CLI and long-running hosts."""

import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with a console renderer.

    Args:
        level: Standard logging level name (e.g. "INFO", "DEBUG")
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
