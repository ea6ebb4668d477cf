"""
Protocol definitions for the manager's external collaborators.
"""

from .backend import BatchOutcome, KeyValueBackend
from .lock import LockHandle, LockProvider

__all__ = [
    "BatchOutcome",
    "KeyValueBackend",
    "LockHandle",
    "LockProvider",
]
