"""LLM gateway examples with mock backends.

Run: python examples/stream_demo.py

Set OPENAI_API_KEY and/or GEMINI_API_KEY and pass --live to use real backends.
"""

import asyncio
import sys

from llm_gateway import (
    GatewayConfig,
    LLMGateway,
    MemoryCache,
    MockProvider,
    OutcomeReporter,
    ProviderRegistry,
    configure_logging,
)


def mock_gateway(primary: MockProvider, secondary: MockProvider) -> LLMGateway:
    config = GatewayConfig(
        openai_api_key="demo",
        gemini_api_key="demo",
        stream_replay_delay_ms=20,
    )
    registry = ProviderRegistry(
        config,
        factories={
            "openai": lambda api_key, model: primary,
            "gemini": lambda api_key, model: secondary,
        },
    )
    return LLMGateway(
        cache=MemoryCache(),
        registry=registry,
        reporter=OutcomeReporter(),
        config=config,
    )


async def buffered_fallback():
    """Example 1: Buffered request with a failing primary."""
    print("\n" + "=" * 50)
    print("EXAMPLE 1: BUFFERED FALLBACK")
    print("=" * 50)

    gateway = mock_gateway(
        MockProvider(provider_name="openai", fail_on_generate=True),
        MockProvider(provider_name="gemini", default_response="Paris.", cost_per_call=0.0001),
    )

    first = await gateway.execute_with_fallback("What is the capital of France?")
    second = await gateway.execute_with_fallback("What is the capital of France?")

    print(f"First:  {first.content} (provider={first.provider}, cached={first.cached})")
    print(f"Second: {second.content} (provider={second.provider}, cached={second.cached})")


async def stream_restart():
    """Example 2: Stream that restarts on the secondary mid-response."""
    print("\n" + "=" * 50)
    print("EXAMPLE 2: MID-STREAM RESTART")
    print("=" * 50)

    gateway = mock_gateway(
        MockProvider(provider_name="openai", chunks=["Once ", "upon "], fail_after=2),
        MockProvider(provider_name="gemini", default_response="Once upon a time, the end."),
    )

    async for fragment in gateway.stream_with_fallback("Tell me a story"):
        print(fragment, end="", flush=True)
    print()

    print("Replaying from cache:")
    async for fragment in gateway.stream_with_fallback("tell me a story"):
        print(fragment, end="", flush=True)
    print()

    for record in gateway.reporter.history():
        print(f"  {record.mode.value}: provider={record.provider} status={record.status.value}")


async def live():
    """Run one streamed request against configured backends."""
    gateway = LLMGateway.from_config()
    async for fragment in gateway.stream_with_fallback("Say hello in three languages."):
        print(fragment, end="", flush=True)
    print()


async def main():
    configure_logging("INFO")

    if "--live" in sys.argv:
        await live()
        return

    await buffered_fallback()
    await stream_restart()


if __name__ == "__main__":
    asyncio.run(main())
