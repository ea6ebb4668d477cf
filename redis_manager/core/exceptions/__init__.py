"""
Exception Module

Module Structure:
-----------------
- **base.py**: ErrorKind enumeration + RedisManagerError (caller-facing)
- **backend.py**: BackendCommandError raised by backend adapters (transient)

Usage:
------
```python
from redis_manager.core.exceptions import ErrorKind, RedisManagerError

try:
    await manager.update("missing", 1)
except RedisManagerError as e:
    assert e.kind is ErrorKind.KEY_NOT_EXIST
```
"""

from redis_manager.core.exceptions.backend import BackendCommandError
from redis_manager.core.exceptions.base import ErrorKind, RedisManagerError

__all__ = [
    "BackendCommandError",
    "ErrorKind",
    "RedisManagerError",
]
