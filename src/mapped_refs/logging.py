"""
Logging configuration for mapped references.

Structured logging via structlog over the standard library. Values held in
cells belong to the host application, so by default they never reach the
log output: fields carrying user values are replaced by their type name.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, cast

import structlog
from structlog.types import FilteringBoundLogger

VALUE_FIELDS = frozenset(
    {
        "value",
        "old_value",
        "new_value",
        "representation",
        "source_value",
    }
)


def _redacted(value: Any) -> str:
    return f"<{type(value).__name__}>"


class ValueRedactingFilter(logging.Filter):
    """
    Filter that strips user values from stdlib log records.

    Extra fields named like value carriers are replaced in place with the
    type name of the value they held.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact value-carrying attributes of a record.

        Args:
            record: Log record to filter

        Returns:
            Always True; records are rewritten, never dropped
        """
        for key in VALUE_FIELDS:
            if key in record.__dict__:
                setattr(record, key, _redacted(record.__dict__[key]))
        return True


class ValueRedactingProcessor:
    """
    Structlog processor that replaces user values with their type name.

    Keeps every other field of the event untouched.
    """

    def __call__(
        self, logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Process log event to redact value fields.

        Args:
            logger: Structlog logger instance
            method_name: Log method name (info, error, etc.)
            event_dict: Event dictionary to process

        Returns:
            Event dictionary with value fields redacted
        """
        for key in VALUE_FIELDS & event_dict.keys():
            event_dict[key] = _redacted(event_dict[key])
        return event_dict


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    redact_values: bool = True,
) -> None:
    """
    Set up structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json, console)
        log_file: Optional log file path
        redact_values: Whether to hide cell values from log output
    """
    level = getattr(logging, log_level.upper())

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_values:
        processors.append(ValueRedactingProcessor())

    if log_format == "json":
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )
    else:
        processors.extend([structlog.dev.ConsoleRenderer(colors=False)])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    if redact_values:
        console_handler.addFilter(ValueRedactingFilter())
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        if redact_values:
            file_handler.addFilter(ValueRedactingFilter())
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return cast(FilteringBoundLogger, structlog.get_logger(name))
