"""Tests for provider adapters and the provider registry.

SDK clients are replaced with small fakes, so no network access or API keys
are needed.
"""

from types import SimpleNamespace

import pytest

from llm_gateway import (
    BackendError,
    GatewayConfig,
    GeminiProvider,
    LLMProvider,
    MockProvider,
    OpenAIProvider,
    ProviderNotFoundError,
    ProviderRegistry,
)


# =============================================================================
# Fakes
# =============================================================================


async def _aiter(items):
    for item in items:
        yield item


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``."""

    def __init__(self, response=None, chunks=None, error: Exception | None = None):
        self.response = response
        self.chunks = chunks or []
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        if kwargs.get("stream"):
            return _aiter(self.chunks)
        return self.response


def openai_with(completions: FakeCompletions) -> OpenAIProvider:
    provider = OpenAIProvider(api_key="sk-test")
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider


def openai_chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class BlockedChunk:
    """Gemini chunk whose ``text`` accessor raises, as the SDK does for empty candidates."""

    @property
    def text(self):
        raise ValueError("no text parts")


class FakeGeminiModel:
    """Stands in for ``genai.GenerativeModel``."""

    def __init__(self, response=None, chunks=None, error: Exception | None = None):
        self.response = response
        self.chunks = chunks or []
        self.error = error

    async def generate_content_async(self, prompt, stream=False):
        if self.error:
            raise self.error
        if stream:
            return _aiter(self.chunks)
        return self.response


def gemini_with(model: FakeGeminiModel) -> GeminiProvider:
    provider = GeminiProvider(api_key="gm-test")
    provider._client = model
    return provider


# =============================================================================
# OpenAI
# =============================================================================


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_generate_computes_cost_from_usage(self):
        completions = FakeCompletions(
            response=SimpleNamespace(
                choices=[SimpleNamespace(message=SimpleNamespace(content="  Hi there  "))],
                usage=SimpleNamespace(prompt_tokens=1000, completion_tokens=2000),
            )
        )
        provider = openai_with(completions)

        result = await provider.generate("Hello")

        assert result.content == "Hi there"
        assert result.provider == "openai"
        # gpt-4o-mini: 0.15 / 0.60 per 1M tokens
        assert result.cost == pytest.approx((1000 * 0.15 + 2000 * 0.60) / 1_000_000)
        assert completions.calls[0]["model"] == "gpt-4o-mini"
        assert completions.calls[0]["messages"] == [{"role": "user", "content": "Hello"}]

    @pytest.mark.asyncio
    async def test_generate_without_usage_costs_nothing(self):
        provider = openai_with(FakeCompletions(
            response=SimpleNamespace(
                choices=[SimpleNamespace(message=SimpleNamespace(content=None))],
                usage=None,
            )
        ))

        result = await provider.generate("Hello")

        assert result.cost == 0.0
        assert result.content == "No response from the model."

    @pytest.mark.asyncio
    async def test_generate_wraps_errors(self):
        original = RuntimeError("quota exceeded")
        provider = openai_with(FakeCompletions(error=original))

        with pytest.raises(BackendError) as exc_info:
            await provider.generate("Hello")

        assert exc_info.value.provider == "openai"
        assert exc_info.value.original_error is original

    @pytest.mark.asyncio
    async def test_stream_skips_empty_deltas(self):
        completions = FakeCompletions(chunks=[
            openai_chunk("Hel"),
            openai_chunk(None),
            SimpleNamespace(choices=[]),
            openai_chunk(""),
            openai_chunk("lo"),
        ])
        provider = openai_with(completions)

        fragments = [f async for f in provider.stream("Hello")]

        assert fragments == ["Hel", "lo"]
        assert completions.calls[0]["stream"] is True

    @pytest.mark.asyncio
    async def test_stream_wraps_errors(self):
        provider = openai_with(FakeCompletions(error=ConnectionError("reset")))

        with pytest.raises(BackendError):
            async for _ in provider.stream("Hello"):
                pass

    def test_unpriced_model_costs_nothing(self):
        provider = OpenAIProvider(api_key="sk-test", model="custom-model")
        assert provider.calculate_cost("custom-model", 100, 100) == 0.0

    def test_dated_model_uses_longest_priced_prefix(self):
        provider = OpenAIProvider(api_key="sk-test", model="gpt-4o-mini-2024-07-18")

        assert provider.calculate_cost(provider.model, 1_000_000, 0) == pytest.approx(0.15)
        assert provider.calculate_cost("gpt-4o-2024-08-06", 1_000_000, 0) == pytest.approx(5.0)

    def test_prefix_of_a_priced_model_is_unpriced(self):
        provider = OpenAIProvider(api_key="sk-test")
        assert provider.calculate_cost("gpt-4", 1_000_000, 1_000_000) == 0.0


# =============================================================================
# Gemini
# =============================================================================


class TestGeminiProvider:
    @pytest.mark.asyncio
    async def test_generate_uses_usage_metadata(self):
        provider = gemini_with(FakeGeminiModel(response=SimpleNamespace(
            text=" Bonjour ",
            usage_metadata=SimpleNamespace(prompt_token_count=4000, candidates_token_count=1000),
        )))

        result = await provider.generate("Hello")

        assert result.content == "Bonjour"
        assert result.provider == "gemini"
        # gemini-1.5-flash: 0.075 / 0.30 per 1M tokens
        assert result.cost == pytest.approx((4000 * 0.075 + 1000 * 0.30) / 1_000_000)

    @pytest.mark.asyncio
    async def test_generate_without_usage_costs_nothing(self):
        provider = gemini_with(FakeGeminiModel(response=SimpleNamespace(text="ok", usage_metadata=None)))

        result = await provider.generate("Hello")

        assert result.cost == 0.0

    @pytest.mark.asyncio
    async def test_generate_wraps_errors(self):
        provider = gemini_with(FakeGeminiModel(error=PermissionError("bad key")))

        with pytest.raises(BackendError) as exc_info:
            await provider.generate("Hello")

        assert exc_info.value.provider == "gemini"

    @pytest.mark.asyncio
    async def test_stream_skips_chunks_without_text(self):
        provider = gemini_with(FakeGeminiModel(chunks=[
            SimpleNamespace(text="One "),
            BlockedChunk(),
            SimpleNamespace(text=""),
            SimpleNamespace(text="two"),
        ]))

        assert [f async for f in provider.stream("Hello")] == ["One ", "two"]


# =============================================================================
# Mock
# =============================================================================


class TestMockProvider:
    @pytest.mark.asyncio
    async def test_keyword_responses(self):
        provider = MockProvider(responses={"weather": "Sunny"})

        assert (await provider.generate("What's the WEATHER?")).content == "Sunny"
        assert (await provider.generate("Anything else")).content == (
            "This is a mock response for your prompt."
        )
        assert provider.call_log == ["What's the WEATHER?", "Anything else"]

    @pytest.mark.asyncio
    async def test_reports_configured_name(self):
        provider = MockProvider(provider_name="gemini")
        assert (await provider.generate("x")).provider == "gemini"
        assert MockProvider().name == "mock"

    @pytest.mark.asyncio
    async def test_stream_splits_words(self):
        provider = MockProvider(default_response="one two")
        assert [f async for f in provider.stream("x")] == ["one ", "two "]

    @pytest.mark.asyncio
    async def test_stream_never_yields_empty_fragments(self):
        provider = MockProvider(chunks=["a", "", "b"])
        assert [f async for f in provider.stream("x")] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_fail_after(self):
        provider = MockProvider(chunks=["a", "b", "c"], fail_after=2)
        received = []

        with pytest.raises(BackendError):
            async for fragment in provider.stream("x"):
                received.append(fragment)

        assert received == ["a", "b"]

    def test_fail_on_start_raises_synchronously(self):
        provider = MockProvider(fail_on_start=True)
        with pytest.raises(BackendError):
            provider.stream("x")

    @pytest.mark.asyncio
    async def test_fail_on_generate(self):
        provider = MockProvider(provider_name="openai", fail_on_generate=True)
        with pytest.raises(BackendError) as exc_info:
            await provider.generate("x")
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_set_response_and_reset(self):
        provider = MockProvider()
        provider.set_response("capital", "Paris")

        assert (await provider.generate("The capital of France?")).content == "Paris"
        assert [f async for f in provider.stream("capital")] == ["Paris "]

        provider.reset()
        assert provider.call_log == []

    @pytest.mark.asyncio
    async def test_response_generator(self):
        provider = MockProvider(response_generator=lambda prompt: prompt.upper())

        assert (await provider.generate("echo me")).content == "ECHO ME"
        assert [f async for f in provider.stream("hi there")] == ["HI ", "THERE "]


# =============================================================================
# Registry
# =============================================================================


class TestProviderRegistry:
    def test_missing_credential_resolves_to_none(self):
        registry = ProviderRegistry(GatewayConfig())

        assert registry.resolve("openai") is None
        assert registry.resolve(LLMProvider.GEMINI) is None
        assert registry.available() == []

    def test_configured_backends_resolve_to_adapters(self):
        registry = ProviderRegistry(GatewayConfig(openai_api_key="sk-test", gemini_api_key="gm-test"))

        openai = registry.resolve("openai")
        gemini = registry.resolve("gemini")

        assert isinstance(openai, OpenAIProvider)
        assert isinstance(gemini, GeminiProvider)
        assert openai.model == "gpt-4o-mini"
        assert gemini.model == "gemini-1.5-flash"
        assert registry.available() == [LLMProvider.OPENAI, LLMProvider.GEMINI]

    def test_new_adapter_per_resolution(self):
        registry = ProviderRegistry(GatewayConfig(openai_api_key="sk-test"))
        assert registry.resolve("openai") is not registry.resolve("openai")

    def test_configured_model_is_passed_through(self):
        registry = ProviderRegistry(GatewayConfig(gemini_api_key="gm-test", gemini_model="gemini-1.5-pro"))
        assert registry.resolve("gemini").model == "gemini-1.5-pro"

    def test_factory_override(self):
        received = []

        def factory(api_key, model):
            received.append((api_key, model))
            return MockProvider(provider_name="openai")

        registry = ProviderRegistry(GatewayConfig(openai_api_key="sk-test"), factories={"openai": factory})

        assert isinstance(registry.resolve("openai"), MockProvider)
        assert received == [("sk-test", "gpt-4o-mini")]

    def test_unknown_backend(self):
        registry = ProviderRegistry(GatewayConfig())
        with pytest.raises(ProviderNotFoundError):
            registry.resolve("nonexistent")

    def test_defaults_registered(self):
        assert {"openai", "gemini"} <= set(ProviderRegistry.list_providers())
