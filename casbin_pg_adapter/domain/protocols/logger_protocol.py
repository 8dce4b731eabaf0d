"""LoggerProtocol definition for structured logging.

This protocol standardizes structured logging across the adapter while
remaining backend-agnostic. Implementations MUST ensure logs are structured
(key-value context) and safe (no secrets: never log connection URLs).

Log Levels (standard 5-level hierarchy):
    - DEBUG: Detailed diagnostic info (statements, row counts)
    - INFO: Normal operational events (policy loaded/saved)
    - WARNING: Degraded behavior (skipped rows)
    - ERROR: Operation failed, exception about to be raised
    - CRITICAL: Unrecoverable failures

Usage:
    from casbin_pg_adapter.core.container import get_logger

    logger: LoggerProtocol = get_logger()
    logger.info("policy_loaded", table="casbin_rule", rules=12)

    table_logger = logger.bind(table="casbin_rule")
    table_logger.info("policy_saved")  # table auto-included
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls MUST be structured: message + key-value context.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Event name (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message.

        Args:
            message: Event name (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message.

        Args:
            message: Event name (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event name (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for unrecoverable failures.

        Args:
            message: Event name (avoid f-strings; use context).
            error: Optional exception instance.
            **context: Structured key-value context fields.
        """
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged (immutable pattern).

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind() - return logger with bound context.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...
