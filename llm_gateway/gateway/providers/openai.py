"""OpenAI provider implementation for the gateway."""

from typing import Any, AsyncIterator

from ...exceptions import BackendError
from ...types import LLMProvider, LLMResponse
from .base import NO_RESPONSE, BaseProvider


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions backend.

    Example:
        provider = OpenAIProvider(api_key="sk-...")
        response = await provider.generate("Hello")
    """

    provider_type = LLMProvider.OPENAI

    default_model = "gpt-4o-mini"

    # Pricing per 1M tokens (input, output)
    pricing = {
        "gpt-4o": (5.0, 15.0),
        "gpt-4o-mini": (0.15, 0.60),
        "gpt-4-turbo": (10.0, 30.0),
        "gpt-3.5-turbo": (0.5, 1.5),
    }

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            model: Chat model name.
            base_url: Optional custom base URL.
            timeout: Request timeout in seconds.
        """
        super().__init__(model)
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the OpenAI client."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI
            except ImportError:
                raise ImportError(
                    "OpenAI package not installed. Install with: pip install openai"
                )

            kwargs: dict[str, Any] = {"api_key": self._api_key, "timeout": self._timeout}
            if self._base_url:
                kwargs["base_url"] = self._base_url

            self._client = AsyncOpenAI(**kwargs)

        return self._client

    def _messages(self, prompt: str) -> list[dict[str, str]]:
        return [{"role": "user", "content": prompt}]

    async def generate(self, prompt: str) -> LLMResponse:
        """Send a completion request to OpenAI.

        Raises:
            BackendError: If the request fails.
        """
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt),
            )

            content = None
            if response.choices:
                content = response.choices[0].message.content
            content = content.strip() if content else NO_RESPONSE

            usage = response.usage
            cost = 0.0
            if usage is not None:
                cost = self.calculate_cost(
                    self.model, usage.prompt_tokens or 0, usage.completion_tokens or 0
                )

        except Exception as e:
            raise BackendError(self.name, str(e), e)

        return LLMResponse(content=content, provider=self.name, cost=cost)

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        """Stream a completion response from OpenAI.

        Raises:
            BackendError: If the request fails before or during streaming.
        """
        try:
            client = self._get_client()
            chunks = await client.chat.completions.create(
                model=self.model,
                messages=self._messages(prompt),
                stream=True,
            )
            async for chunk in chunks:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content

        except Exception as e:
            raise BackendError(self.name, str(e), e)
