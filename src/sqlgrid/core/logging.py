"""Structured logging for sqlgrid.

Records go to stderr; stdout carries only rendered grids and copied or
exported data. Every record names the component that emitted it
(``render``, ``export.xlsx``, ``aio.writer``, ...). During a CLI run it also
names the command being executed.

sqlgrid has two levels: WARNING by default, so that fallback notices show
and progress chatter does not, and DEBUG with ``--verbose``.
"""

import logging
import sys
from typing import Any

import structlog

QUIET_LEVEL = logging.WARNING
VERBOSE_LEVEL = logging.DEBUG


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Looked up per logger: CliRunner replaces sys.stderr between invocations.
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(verbose: bool = False) -> None:
    """Configure structlog for one sqlgrid run."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            VERBOSE_LEVEL if verbose else QUIET_LEVEL
        ),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def bind_command(command: str | None, **context: Any) -> None:
    """Tag every later record with the CLI command (and extra context).

    Replaces whatever a previous command bound.
    """
    structlog.contextvars.clear_contextvars()
    if command:
        structlog.contextvars.bind_contextvars(command=command, **context)


def get_logger(component: str, **context: Any) -> Any:
    """Logger tagged with the emitting component.

    Call inside functions, after setup_logging(); a logger bound at import
    time keeps the configuration that existed then.
    """
    return structlog.get_logger().bind(component=component, **context)
