"""Domain protocols package.

Usage:
    from casbin_pg_adapter.domain.protocols import LoggerProtocol
"""

from casbin_pg_adapter.domain.protocols.logger_protocol import LoggerProtocol

__all__ = ["LoggerProtocol"]
