"""Cache contract used by the gateway."""

from abc import ABC, abstractmethod


class BaseCache(ABC):
    """Key/value store of opaque string payloads with per-entry expiry.

    Operations are coroutines so that out-of-process implementations can be
    swapped in without changing the gateway.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None on miss or expiry."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: float) -> None:
        """Store a value that expires ``ttl_seconds`` from now."""
