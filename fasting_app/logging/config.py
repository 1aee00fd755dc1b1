"""
Logging setup for the fasting tracker.

Log records are structlog events rendered on stderr, so the CLI's status
lines on stdout stay machine-readable. Session transitions are written to an
audit trail through ``get_state_logger`` and ``log_state_transition``; goal
alerts and the ticker log through ``get_scheduler_logger``.
"""
import logging
import sys
from typing import IO, Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

from ..config.defaults import LoggingParams


def configure_logging(
    level: str = "WARNING",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    stream: Optional[IO[str]] = None
) -> None:
    """
    Configure structlog for the tracker.

    Safe to call more than once; every call replaces the previous setup, so
    each CLI invocation applies its own configuration.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Render one JSON object per line instead of console output
        include_timestamp: Add an ISO timestamp to every event
        include_caller: Add the emitting file name and line number
        stream: Destination for log lines (stderr by default)

    Raises:
        ValueError: if ``level`` is not a known logging level
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    stream = stream or sys.stderr
    logging.basicConfig(
        level=log_level,
        stream=stream,
        format="%(message)s",
        force=True
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if format_json:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    # Reconfiguration must reach loggers that were already used
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_from_params(params: LoggingParams) -> None:
    """Apply the ``logging`` config section; JSON output carries timestamps."""
    configure_logging(
        level=params.level,
        format_json=params.format_json,
        include_timestamp=params.format_json,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Logger for ``name`` (typically ``__name__``)."""
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Logger for session state transitions.

    Events carry ``subsystem="state_machine"`` and ``audit_trail=True`` so the
    transition history can be filtered out of the log stream.
    """
    # Initial values keep the proxy lazy so configure_logging still applies
    return structlog.get_logger(
        name,
        subsystem="state_machine",
        audit_trail=True
    )


def get_scheduler_logger(name: str) -> FilteringBoundLogger:
    """Logger for the ticker and the goal alert scheduler."""
    return structlog.get_logger(name, subsystem="scheduler")


def log_state_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a session state transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition (start, end, reset, ...)
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
