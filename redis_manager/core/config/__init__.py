"""
Configuration Module

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Wire markers, key prefixes, stage identifiers and defaults

Environment Variables:
---------------------
```bash
# Redis
REDIS_HOST=localhost
REDIS_PORT=6379

# Manager
MANAGER_NAMESPACE=sessions
MANAGER_DEFAULT_EXPIRY_MS=60000
MANAGER_MAX_RETRIES=5
MANAGER_LOCKING_ENABLED=true
MANAGER_DEFAULT_LOCK_TTL_MS=5000

# Lock provider
LOCK_RETRY_COUNT=10
LOCK_RETRY_DELAY_MS=200

# Logging
LOG_LEVEL=INFO
LOG_FORMAT=json
```
"""

from redis_manager.core.config.constants import (
    BIGINT_TAG,
    BUFFER_TAG,
    DEFAULT_LOCK_TTL_MS,
    DEFAULT_MAX_RETRIES,
    LOCK_KEY_PREFIX,
    NAMESPACE_SEPARATOR,
    WRITE_OK,
    SetMode,
    Stage,
)
from redis_manager.core.config.settings import (
    LockProviderSettings,
    LoggingSettings,
    ManagerSettings,
    RedisSettings,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    # Settings
    "Settings",
    "RedisSettings",
    "ManagerSettings",
    "LockProviderSettings",
    "LoggingSettings",
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "SetMode",
    # Constants
    "BIGINT_TAG",
    "BUFFER_TAG",
    "DEFAULT_LOCK_TTL_MS",
    "DEFAULT_MAX_RETRIES",
    "LOCK_KEY_PREFIX",
    "NAMESPACE_SEPARATOR",
    "WRITE_OK",
]
