"""
Codec Module

Key prefixing and type-preserving value encoding.
"""

from .prefix import PrefixCodec
from .value import ValueCodec

__all__ = [
    "PrefixCodec",
    "ValueCodec",
]
