"""Console logging adapter.

Writes structured adapter events to stdout through structlog:
- Interactive use: colored key=value console renderer
- Services/CI: one JSON object per line

ConsoleAdapter satisfies LoggerProtocol structurally (PEP 544) and does not
inherit from it.

Usage:
    logger = ConsoleAdapter(use_json=True, level="DEBUG").bind(table="casbin_rule")
    logger.info("policy_loaded", rules=12)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _configure(*, use_json: bool, level: str) -> None:
    """Install the process-wide structlog pipeline."""
    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        # Reconfiguration (another adapter, another level) must reach
        # loggers that were already used.
        cache_logger_on_first_use=False,
    )


def _exception_context(error: Exception | None, context: dict[str, Any]) -> dict[str, Any]:
    if error is not None:
        context["error_type"] = type(error).__name__
        context["error_message"] = str(error)
    return context


class ConsoleAdapter:
    """structlog-backed logger for policy adapter events.

    Args:
        use_json (bool): Render JSON lines instead of the console renderer.
        level (str): Minimum level name that is emitted.
    """

    def __init__(self, *, use_json: bool = False, level: str = "INFO") -> None:
        _configure(use_json=use_json, level=level)
        self._logger = structlog.get_logger()

    @classmethod
    def _wrapping(cls, logger: Any) -> ConsoleAdapter:
        adapter = cls.__new__(cls)
        adapter._logger = logger
        return adapter

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a diagnostic event (statements, row counts)."""
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        """Log a normal operational event."""
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        """Log degraded behavior, such as a skipped row."""
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a failed operation.

        Args:
            message (str): Event name.
            error (Exception | None): Exception about to be raised; its type
                and message are added as error_type / error_message.
            **context: Structured key-value context.
        """
        self._logger.error(message, **_exception_context(error, context))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an unrecoverable failure (same exception handling as error())."""
        self._logger.critical(message, **_exception_context(error, context))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return a new adapter that adds `context` to every event.

        The receiving adapter is left unchanged.
        """
        return self._wrapping(self._logger.bind(**context))

    def with_context(self, **context: Any) -> ConsoleAdapter:
        return self.bind(**context)
