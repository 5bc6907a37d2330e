"""Structured logging for the layout engine.

Every stage logs at debug level only: dropped feed entries, merge counts,
repacked clusters and collapse transitions. The engine never configures
output on import; a host application or the example script calls
``setup_logging`` once to choose between console and JSON rendering.
"""

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Route layout events to stdout.

    Args:
        json_output: Render one JSON object per event instead of console lines.
        log_level: Lowest level to emit; ``DEBUG`` shows the per-stage events.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for one engine module, e.g. ``get_logger(__name__)``."""
    return structlog.get_logger(name)
