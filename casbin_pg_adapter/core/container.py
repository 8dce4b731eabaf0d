"""Dependency factories (composition root).

Application-scoped singletons shared by every adapter instance in a process:
- Logging (console, human-readable or JSON)

Usage:
    from casbin_pg_adapter.core.container import get_logger

    logger = get_logger()
    logger.info("policy_loaded", rules=12)
"""

import os
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from casbin_pg_adapter.domain.protocols.logger_protocol import LoggerProtocol


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Reads CASBIN_ADAPTER_LOG_LEVEL and CASBIN_ADAPTER_LOG_JSON directly so a
    logger is available before (and without) a full AdapterSettings, which
    requires a data source name.

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from casbin_pg_adapter.infrastructure.logging.console_adapter import (
        ConsoleAdapter,
    )

    level = os.environ.get("CASBIN_ADAPTER_LOG_LEVEL", "INFO")
    use_json = os.environ.get("CASBIN_ADAPTER_LOG_JSON", "").lower() in {
        "1",
        "true",
        "yes",
    }
    return ConsoleAdapter(use_json=use_json, level=level)
