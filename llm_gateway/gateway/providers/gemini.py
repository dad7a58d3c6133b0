"""Google Gemini provider implementation for the gateway."""

from typing import Any, AsyncIterator

from ...exceptions import BackendError
from ...types import LLMProvider, LLMResponse
from .base import NO_RESPONSE, BaseProvider


def _chunk_text(chunk: Any) -> str:
    """Text of a response or stream chunk; empty when it carries no parts."""
    try:
        return chunk.text or ""
    except ValueError:
        # Raised by the SDK for candidates without text parts (e.g. safety stops)
        return ""


class GeminiProvider(BaseProvider):
    """Google Gemini backend.

    Example:
        provider = GeminiProvider(api_key="...")
        response = await provider.generate("Hello")
    """

    provider_type = LLMProvider.GEMINI

    default_model = "gemini-1.5-flash"

    # Pricing per 1M tokens (input, output)
    pricing = {
        "gemini-1.5-pro": (3.5, 10.5),
        "gemini-1.5-flash": (0.075, 0.30),
        "gemini-2.0-flash": (0.10, 0.40),
    }

    def __init__(self, api_key: str, model: str | None = None):
        """Initialize Gemini provider.

        Args:
            api_key: Google API key.
            model: Gemini model name.
        """
        super().__init__(model)
        self._api_key = api_key
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the Gemini model client."""
        if self._client is None:
            try:
                import google.generativeai as genai
            except ImportError:
                raise ImportError(
                    "Google Generative AI package not installed. "
                    "Install with: pip install google-generativeai"
                )

            genai.configure(api_key=self._api_key)
            self._client = genai.GenerativeModel(self.model)

        return self._client

    def _cost_from_usage(self, response: Any) -> float:
        usage = getattr(response, "usage_metadata", None)
        if not usage:
            return 0.0
        input_tokens = getattr(usage, "prompt_token_count", 0) or 0
        output_tokens = getattr(usage, "candidates_token_count", 0) or 0
        return self.calculate_cost(self.model, input_tokens, output_tokens)

    async def generate(self, prompt: str) -> LLMResponse:
        """Send a generation request to Gemini.

        Raises:
            BackendError: If the request fails.
        """
        try:
            model = self._get_client()
            response = await model.generate_content_async(prompt)
            content = _chunk_text(response).strip() or NO_RESPONSE
            cost = self._cost_from_usage(response)
        except Exception as e:
            raise BackendError(self.name, str(e), e)

        return LLMResponse(content=content, provider=self.name, cost=cost)

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """Stream a generation response from Gemini.

        Raises:
            BackendError: If the request fails before or during streaming.
        """
        try:
            model = self._get_client()
            response = await model.generate_content_async(prompt, stream=True)
            async for chunk in response:
                text = _chunk_text(chunk)
                if text:
                    yield text

        except Exception as e:
            raise BackendError(self.name, str(e), e)
