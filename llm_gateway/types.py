"""Core types and data models for the LLM gateway."""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class LLMProvider(str, Enum):
    """Supported LLM backends."""

    OPENAI = "openai"
    GEMINI = "gemini"
    MOCK = "mock"


class OutcomeStatus(str, Enum):
    """Final status of a gateway request."""

    SUCCESS = "success"
    FALLBACK_TRIGGERED = "fallback_triggered"
    FAILED = "failed"


class DeliveryMode(str, Enum):
    """How a response is delivered to the caller."""

    BUFFERED = "buffered"
    STREAM = "stream"


# Label reported when a stream is replayed from cache instead of a backend.
CACHE_BACKEND = "cache"


# =============================================================================
# Responses
# =============================================================================


class LLMResponse(BaseModel):
    """Result of a buffered generation, fresh or served from cache."""

    content: str
    provider: str
    cost: float = Field(default=0.0, ge=0.0, description="Estimated cost in dollars")
    timestamp: datetime = Field(default_factory=datetime.now)
    cached: bool = Field(default=False, description="True only when served from cache")

    def to_cache_payload(self) -> str:
        """Serialize for storage; the cached flag is never persisted."""
        return self.model_dump_json(exclude={"cached"})

    @classmethod
    def from_cache_payload(cls, payload: str) -> "LLMResponse":
        """Rebuild a response from a stored payload, marked as cached."""
        response = cls.model_validate_json(payload)
        response.cached = True
        return response


# =============================================================================
# Request tracking
# =============================================================================


@dataclass
class RequestContext:
    """Per-request data carried through for outcome reporting."""

    prompt: str
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    start_time: float = field(default_factory=time.time)

    def elapsed_ms(self) -> float:
        return (time.time() - self.start_time) * 1000


class OutcomeRecord(BaseModel):
    """One structured record per gateway request."""

    request_id: str
    prompt: str
    provider: str | None
    cache_hit: bool
    latency_ms: float
    status: OutcomeStatus
    mode: DeliveryMode
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_log_fields(self) -> dict[str, object]:
        return {
            "request_id": self.request_id,
            "prompt": self.prompt,
            "provider": self.provider,
            "cache_hit": self.cache_hit,
            "latency_ms": round(self.latency_ms, 2),
            "status": self.status.value,
            "mode": self.mode.value,
        }
