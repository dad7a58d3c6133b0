"""LLM Gateway - cached, failover-capable access to chat LLM backends.

Usage:
    from llm_gateway import GatewayConfig, LLMGateway

    gateway = LLMGateway.from_config(GatewayConfig.from_env())

    # Buffered
    result = await gateway.execute_with_fallback("What is 2+2?")

    # Streamed
    async for fragment in gateway.stream_with_fallback("What is 2+2?"):
        print(fragment, end="")
"""

__version__ = "0.1.0"

# Types
from .types import (
    CACHE_BACKEND,
    DeliveryMode,
    LLMProvider,
    LLMResponse,
    OutcomeRecord,
    OutcomeStatus,
    RequestContext,
)

# Exceptions
from .exceptions import (
    BackendError,
    GatewayError,
    InvalidPromptError,
    NoProviderAvailableError,
    ProviderNotFoundError,
)

# Configuration
from .config import GatewayConfig

# Cache
from .cache import BaseCache, MemoryCache

# Gateway
from .gateway import (
    PRIORITY,
    BaseProvider,
    GeminiProvider,
    LLMGateway,
    MockProvider,
    OpenAIProvider,
    OutcomeReporter,
    ProviderRegistry,
    StreamState,
    buffered_cache_key,
    normalize_prompt,
    replay_cached,
    stream_cache_key,
    truncate_prompt,
)

# Logging
from .utils.logging import StructuredLogger, configure_logging, get_logger

__all__ = [
    "__version__",
    # Types
    "CACHE_BACKEND",
    "DeliveryMode",
    "LLMProvider",
    "LLMResponse",
    "OutcomeRecord",
    "OutcomeStatus",
    "RequestContext",
    # Exceptions
    "GatewayError",
    "BackendError",
    "InvalidPromptError",
    "NoProviderAvailableError",
    "ProviderNotFoundError",
    # Configuration
    "GatewayConfig",
    # Cache
    "BaseCache",
    "MemoryCache",
    # Gateway
    "LLMGateway",
    "StreamState",
    "ProviderRegistry",
    "PRIORITY",
    "OutcomeReporter",
    "BaseProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "MockProvider",
    "buffered_cache_key",
    "stream_cache_key",
    "normalize_prompt",
    "replay_cached",
    "truncate_prompt",
    # Logging
    "configure_logging",
    "get_logger",
    "StructuredLogger",
]
