"""Base provider interface for the gateway.

All backend integrations must inherit from BaseProvider.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from ...types import LLMProvider, LLMResponse

NO_RESPONSE = "No response from the model."


class BaseProvider(ABC):
    """Abstract base class for LLM backends.

    A provider offers two capabilities over a single prompt: a buffered
    ``generate`` round trip and an incremental ``stream`` of text fragments.
    Both raise ``BackendError`` when the backend call fails.

    Example:
        class MyProvider(BaseProvider):
            provider_type = LLMProvider.OPENAI

            async def generate(self, prompt: str) -> LLMResponse:
                ...

            async def stream(self, prompt: str) -> AsyncIterator[str]:
                ...
    """

    # Provider identifier
    provider_type: LLMProvider

    # Default model
    default_model: str = ""

    # Pricing per 1M tokens (input, output)
    pricing: dict[str, tuple[float, float]] = {}

    def __init__(self, model: str | None = None):
        self.model = model or self.default_model

    @property
    def name(self) -> str:
        return self.provider_type.value

    @abstractmethod
    async def generate(self, prompt: str) -> LLMResponse:
        """Send one prompt and wait for the full response.

        Args:
            prompt: The user prompt.

        Returns:
            LLMResponse with content and estimated cost.

        Raises:
            BackendError: If the backend call fails.
        """

    @abstractmethod
    def stream(self, prompt: str) -> AsyncIterator[str]:
        """Stream the response to a prompt.

        Yields non-empty text fragments in emission order. May raise
        ``BackendError`` before the first fragment or partway through.
        """

    def calculate_cost(
        self, model: str, input_tokens: int, output_tokens: int
    ) -> float:
        """Calculate cost for a request.

        Args:
            model: Model name.
            input_tokens: Number of input tokens.
            output_tokens: Number of output tokens.

        Returns:
            Cost in dollars, 0.0 for unpriced models.
        """
        if model not in self.pricing:
            # Dated snapshots (e.g. gpt-4o-mini-2024-07-18) take the longest priced prefix
            for model_key in sorted(self.pricing, key=len, reverse=True):
                if model.startswith(model_key):
                    model = model_key
                    break
            else:
                return 0.0

        input_price, output_price = self.pricing[model]
        cost = (max(input_tokens, 0) * input_price + max(output_tokens, 0) * output_price)
        return cost / 1_000_000
