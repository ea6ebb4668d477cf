"""
System Constants and Enumerations

Constants shared by the manager, the codecs and the Redis adapters.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for wire-format markers and key prefixes
- Type-safe enums for stage identifiers and write modes
- Easy to update and track changes
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Operation stages used as the ``stage`` field of every log event.

    Format: {COMPONENT}.{OPERATION}

    Examples:
        logger.info("Key added", stage=Stage.ADD, key="user:1")
    """

    # Manager operations
    ADD = "MGR.ADD"
    UPDATE = "MGR.UPDATE"
    UPSERT = "MGR.UPSERT"
    DELETE = "MGR.DELETE"
    GET = "MGR.GET"
    HAS = "MGR.HAS"
    KEYS = "MGR.KEYS"
    CLEAR_NAMESPACE = "MGR.CLEAR_NAMESPACE"
    CLEAR_ALL = "MGR.CLEAR_ALL"

    # Cross-cutting concerns
    LOCK_ACQUIRE = "LOCK.ACQUIRE"
    LOCK_RELEASE = "LOCK.RELEASE"
    RETRY = "R_RETRY_LOGIC"
    CODEC = "CODEC"

    # Redis adapter
    REDIS_CONNECT = "REDIS.CONNECT"
    REDIS_DISCONNECT = "REDIS.DISCONNECT"
    REDIS_COMMAND = "REDIS.COMMAND"


# ============================================================================
# Conditional Write Modes
# ============================================================================


class SetMode(str, Enum):
    """
    Conditional write modes for the backend SET.

    NX: set only if the key is absent
    XX: set only if the key is present
    ALWAYS: unconditional set
    """

    NX = "NX"
    XX = "XX"
    ALWAYS = "ALWAYS"


# ============================================================================
# Key Layout
# ============================================================================

NAMESPACE_SEPARATOR = ":"
LOCK_KEY_PREFIX = "lock:"

# SCAN batch hint used by namespace listing and flushing
SCAN_COUNT = 500


# ============================================================================
# Value Codec Wire Markers
# ============================================================================

BIGINT_TAG = "<JSON_HANDLER_BIGINT_TAG>"
BUFFER_TAG = "<JSON_HANDLER_BUFFER_TAG>"

# orjson serializes integers only within the signed 64-bit range
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


# ============================================================================
# Manager Defaults
# ============================================================================

DEFAULT_MAX_RETRIES = 5
DEFAULT_LOCK_TTL_MS = 5_000

# Lock acquisition polling (mirrors Redlock retryCount / retryDelay)
DEFAULT_LOCK_RETRY_COUNT = 10
DEFAULT_LOCK_RETRY_DELAY_MS = 200

WRITE_OK = "OK"
