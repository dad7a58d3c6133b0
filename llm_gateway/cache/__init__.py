"""Response cache for the gateway."""

from .base import BaseCache
from .memory import CacheEntry, MemoryCache

__all__ = [
    "BaseCache",
    "CacheEntry",
    "MemoryCache",
]
