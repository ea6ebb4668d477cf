from .logger import get_logger, get_operation_id, operation_scope, setup_logging

__all__ = [
    "get_logger",
    "get_operation_id",
    "operation_scope",
    "setup_logging",
]
