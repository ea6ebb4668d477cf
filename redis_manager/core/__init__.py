"""
Core Module

Foundational components: configuration, logging, exceptions, protocols and
retry.
"""

from .exceptions import BackendCommandError, ErrorKind, RedisManagerError
from .logging import get_logger, get_operation_id, operation_scope, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "get_operation_id",
    "operation_scope",
    "BackendCommandError",
    "ErrorKind",
    "RedisManagerError",
]
