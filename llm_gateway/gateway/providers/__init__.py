"""LLM backend implementations for the gateway.

Supported backends:
- OpenAI (primary)
- Google Gemini (secondary)
- Mock (for testing)
"""

from ...types import LLMProvider
from ..registry import ProviderRegistry
from .base import BaseProvider
from .gemini import GeminiProvider
from .mock import MockProvider
from .openai import OpenAIProvider

# Register backends
ProviderRegistry.register(
    LLMProvider.OPENAI, lambda api_key, model: OpenAIProvider(api_key=api_key, model=model)
)
ProviderRegistry.register(
    LLMProvider.GEMINI, lambda api_key, model: GeminiProvider(api_key=api_key, model=model)
)

__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "MockProvider",
]
