# src/foundry/core/logging.py
"""Structured logging configuration for Foundry.

Architecture:
    This module configures BOTH structlog and stdlib logging to emit
    consistent output (JSON or console). ProcessorFormatter routes stdlib
    log records through structlog's processor chain, so modules using
    logging.getLogger(__name__) and modules using get_logger() produce the
    same format.

The orchestrator binds ``run_id`` (and ``node_id`` per node) through
structlog contextvars, so every line emitted during a run carries them.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

# Third-party loggers that are noise at DEBUG level.
_NOISY_LOGGERS: tuple[str, ...] = (
    "dynaconf",
    "asyncio",
)


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Remove internal structlog fields from output.

    ProcessorFormatter always adds _record and _from_structlog when processing
    log records. They are bookkeeping and must not appear in output.
    """
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: Any = None,
) -> None:
    """Configure structlog and stdlib logging for Foundry.

    Args:
        json_output: If True, output JSON. If False, human-readable.
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        stream: Output stream. Defaults to stderr so that command output
            on stdout (manifests, JSON results) stays machine-readable.
    """
    log_level = getattr(logging, level.upper())

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        final_processors: list[Any] = [
            _remove_internal_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [
            _remove_internal_fields,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Disabled so tests can reconfigure without stale loggers
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(log_level)

    # Never make noisy loggers less restrictive than the root level.
    noisy_level = max(log_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__).
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
