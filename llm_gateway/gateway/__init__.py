"""Gateway layer.

The gateway is the single entry point for prompts. It provides:
- Cache lookup and write-back for buffered and streamed delivery
- Primary/secondary backend selection with one fallback attempt
- Mid-stream failover that never caches a spliced response
- One outcome record per request

Callers never talk to a backend directly - all prompts go through the gateway.
"""

from .gateway import LLMGateway, StreamState, replay_cached
from .keys import buffered_cache_key, normalize_prompt, stream_cache_key
from .providers import (
    BaseProvider,
    GeminiProvider,
    MockProvider,
    OpenAIProvider,
)
from .registry import PRIORITY, ProviderRegistry
from .reporter import OutcomeReporter, truncate_prompt

__all__ = [
    "LLMGateway",
    "StreamState",
    "replay_cached",
    "buffered_cache_key",
    "stream_cache_key",
    "normalize_prompt",
    "BaseProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "MockProvider",
    "ProviderRegistry",
    "PRIORITY",
    "OutcomeReporter",
    "truncate_prompt",
]
