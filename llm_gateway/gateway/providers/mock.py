"""Mock provider for exercising the gateway without external API calls."""

import asyncio
from typing import AsyncIterator, Callable

from ...exceptions import BackendError
from ...types import LLMProvider, LLMResponse
from .base import BaseProvider

MOCK_RESPONSE = "This is a mock response for your prompt."


class MockProvider(BaseProvider):
    """Deterministic LLM backend for tests, demos and local development.

    Failure modes are explicit switches rather than random rates, so every
    fallback branch of the gateway can be driven on purpose.

    Example:
        provider = MockProvider(
            provider_name="openai",
            chunks=["a", "b"],
            fail_after=2,
        )
    """

    provider_type = LLMProvider.MOCK

    def __init__(
        self,
        provider_name: str | None = None,
        default_response: str = MOCK_RESPONSE,
        responses: dict[str, str] | None = None,
        chunks: list[str] | None = None,
        cost_per_call: float = 0.0,
        latency_ms: float = 0,
        fail_on_generate: bool = False,
        fail_on_start: bool = False,
        fail_after: int | None = None,
        response_generator: Callable[[str], str] | None = None,
    ):
        """Initialize mock provider.

        Args:
            provider_name: Identifier to report, e.g. "openai" to stand in for it.
            default_response: Response when no keyword matches.
            responses: Dict mapping keywords to responses.
            chunks: Exact fragments to stream. Defaults to the response split
                into words, each with a trailing space.
            cost_per_call: Cost reported by generate().
            latency_ms: Simulated latency per call and per fragment.
            fail_on_generate: generate() raises BackendError.
            fail_on_start: stream() raises BackendError before returning an iterator.
            fail_after: Stream raises BackendError after this many fragments.
            response_generator: Custom function mapping prompt to response.
        """
        super().__init__(model="mock-model")
        self._name = provider_name or self.provider_type.value
        self._default_response = default_response
        self._responses = responses or {}
        self._chunks = chunks
        self._cost_per_call = cost_per_call
        self._latency_ms = latency_ms
        self._fail_on_generate = fail_on_generate
        self._fail_on_start = fail_on_start
        self._fail_after = fail_after
        self._response_generator = response_generator
        self._call_log: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[str]:
        """Prompts received, in call order, for both capabilities."""
        return self._call_log

    def set_response(self, keyword: str, response: str) -> None:
        """Set a response for a keyword."""
        self._responses[keyword] = response

    async def generate(self, prompt: str) -> LLMResponse:
        self._call_log.append(prompt)
        await self._sleep()

        if self._fail_on_generate:
            raise BackendError(self.name, "Simulated failure")

        return LLMResponse(
            content=self._generate_response(prompt),
            provider=self.name,
            cost=self._cost_per_call,
        )

    def stream(self, prompt: str) -> AsyncIterator[str]:
        self._call_log.append(prompt)
        if self._fail_on_start:
            raise BackendError(self.name, "Simulated stream start failure")
        return self._iter_chunks(prompt)

    async def _iter_chunks(self, prompt: str) -> AsyncIterator[str]:
        for index, chunk in enumerate(self._stream_chunks(prompt)):
            if self._fail_after is not None and index >= self._fail_after:
                raise BackendError(self.name, f"Simulated failure after {index} chunks")
            await self._sleep()
            if chunk:
                yield chunk

        if self._fail_after is not None and self._fail_after >= len(self._stream_chunks(prompt)):
            raise BackendError(self.name, "Simulated failure at end of stream")

    def _stream_chunks(self, prompt: str) -> list[str]:
        if self._chunks is not None:
            return self._chunks
        return [word + " " for word in self._generate_response(prompt).split()]

    def _generate_response(self, prompt: str) -> str:
        """Generate response based on prompt."""
        if self._response_generator:
            return self._response_generator(prompt)

        for keyword, response in self._responses.items():
            if keyword.lower() in prompt.lower():
                return response

        return self._default_response

    async def _sleep(self) -> None:
        if self._latency_ms:
            await asyncio.sleep(self._latency_ms / 1000)

    def reset(self) -> None:
        """Reset call log."""
        self._call_log.clear()
