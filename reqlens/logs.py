"""
Logging setup for ReqLens

Structured logs go to stderr so that report and JSON output on stdout
stay clean.
"""

import logging
import sys

import structlog


def configure_logging(verbose: bool = False, json: bool = False):
    """
    Configure structlog.

    Args:
        verbose: Emit debug events (default: warnings and above)
        json: Render JSON lines instead of the colored console format
    """
    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    level = logging.DEBUG if verbose else logging.WARNING

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
