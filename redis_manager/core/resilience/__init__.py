"""
Resilience Module

Bounded, delay-free retry of transient backend failures.
"""

from .retry import call_with_retry, create_backend_retrying

__all__ = [
    "call_with_retry",
    "create_backend_retrying",
]
