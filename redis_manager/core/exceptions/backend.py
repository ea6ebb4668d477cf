"""
Backend Transport Exceptions

Raised by backend adapters when a command could not be executed. The manager
treats these as transient: it retries them and converts exhaustion into
``ErrorKind.BACKEND_INTERNAL``.
"""

from typing import Any


class BackendCommandError(Exception):
    """
    Raised when a backend command fails to execute.

    Common causes:
    - Redis server is down or restarting
    - Network connectivity issues
    - Socket timeout
    - Script or pipeline execution aborted
    """

    def __init__(self, message: str, command: str | None = None, details: dict[str, Any] | None = None):
        self.message = message
        self.command = command
        self.details = (details or {}).copy()
        super().__init__(self.message)
