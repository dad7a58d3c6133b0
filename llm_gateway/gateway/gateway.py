"""Gateway - the orchestrator every prompt flows through.

FLOW (buffered):
1. Caller awaits gateway.execute_with_fallback(prompt)
2. Gateway checks the CACHE
3. On miss, gateway tries the PRIMARY backend, then the SECONDARY once
4. Gateway writes the result back to the CACHE and REPORTS the outcome

FLOW (streamed):
1. Caller iterates gateway.stream_with_fallback(prompt)
2. A cache hit is replayed as a simulated stream
3. On miss, fragments are forwarded as they arrive; a mid-stream failure
   restarts accumulation on the SECONDARY
4. Only one backend's complete output is ever cached

The gateway keeps no per-request state of its own; cache, registry and
reporter are injected and shared.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator

from pydantic import ValidationError

from ..cache import BaseCache, MemoryCache
from ..config import GatewayConfig
from ..exceptions import BackendError, InvalidPromptError, NoProviderAvailableError
from ..types import (
    CACHE_BACKEND,
    DeliveryMode,
    LLMProvider,
    LLMResponse,
    OutcomeStatus,
    RequestContext,
)
from ..utils.logging import configure_logging
from .keys import buffered_cache_key, stream_cache_key
from .providers.base import BaseProvider
from .registry import PRIORITY, ProviderRegistry
from .reporter import OutcomeReporter

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"(\s+)")


async def replay_cached(text: str, delay: float = 0.02) -> AsyncIterator[str]:
    """Replay cached text as a stream of alternating word/whitespace segments.

    Concatenating the yielded segments reproduces ``text`` exactly.
    """
    for segment in _WHITESPACE.split(text):
        if segment:
            yield segment
            await asyncio.sleep(delay)


async def _close(stream: AsyncIterator[str]) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


def _require_prompt(prompt: str) -> None:
    if not isinstance(prompt, str) or not prompt.strip():
        raise InvalidPromptError()


class StreamState(str, Enum):
    """States of a backend stream after a cache miss."""

    STREAMING_PRIMARY = "streaming_primary"
    STREAMING_SECONDARY = "streaming_secondary"
    COMPLETED = "completed"
    FAILED_PROPAGATE = "failed_propagate"


@dataclass
class _StreamRun:
    """Backend currently streaming and the text accumulated from it."""

    provider: BaseProvider
    stream: AsyncIterator[str]
    state: StreamState
    used_fallback: bool = False
    buffer: list[str] = field(default_factory=list)

    def restart_on(self, provider: BaseProvider, prompt: str) -> None:
        """Switch to another backend; text from the failed one is discarded.

        The new backend is current before its stream starts, so a start
        failure is attributed to it.
        """
        self.provider = provider
        self.state = StreamState.STREAMING_SECONDARY
        self.used_fallback = True
        self.buffer = []
        self.stream = provider.stream(prompt)

    @property
    def text(self) -> str:
        return "".join(self.buffer)


class LLMGateway:
    """Cache-first, failover-capable front for two LLM backends.

    Usage:
        gateway = LLMGateway.from_config(GatewayConfig.from_env())
        result = await gateway.execute_with_fallback("Hello")

        async for fragment in gateway.stream_with_fallback("Hello"):
            print(fragment, end="")
    """

    def __init__(
        self,
        cache: BaseCache,
        registry: ProviderRegistry,
        reporter: OutcomeReporter | None = None,
        config: GatewayConfig | None = None,
        priority: tuple[LLMProvider, LLMProvider] = PRIORITY,
    ):
        """Create gateway.

        Args:
            cache: Shared response cache.
            registry: Resolves backend names to adapters.
            reporter: Outcome sink. Defaults to a fresh OutcomeReporter.
            config: TTLs and replay delay. Defaults to the registry's config.
            priority: (primary, secondary) backend names.
        """
        self._cache = cache
        self._registry = registry
        self._config = config or registry.config
        self._reporter = reporter or OutcomeReporter(
            preview_length=self._config.prompt_preview_length
        )
        self._primary, self._secondary = priority

    @classmethod
    def from_config(cls, config: GatewayConfig | None = None) -> "LLMGateway":
        """Wire a gateway with an in-memory cache and the default registry.

        Also applies ``config.log_level`` to the gateway loggers.
        """
        config = config or GatewayConfig.from_env()
        configure_logging(config.log_level)
        return cls(
            cache=MemoryCache(max_entries=config.cache_max_entries),
            registry=ProviderRegistry(config),
            reporter=OutcomeReporter(preview_length=config.prompt_preview_length),
            config=config,
        )

    @property
    def cache(self) -> BaseCache:
        return self._cache

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def reporter(self) -> OutcomeReporter:
        return self._reporter

    # =========================================================================
    # BUFFERED PATH
    # =========================================================================

    async def execute_with_fallback(
        self,
        prompt: str,
        context: RequestContext | None = None,
    ) -> LLMResponse:
        """Generate a full response, from cache or from a backend.

        Args:
            prompt: Non-empty prompt text.
            context: Request tracking data. Created if omitted.

        Returns:
            LLMResponse; ``cached`` is True only when served from cache.

        Raises:
            InvalidPromptError: If the prompt is empty.
            NoProviderAvailableError: If no backend is configured.
            BackendError: If the backend that was tried last fails.
        """
        _require_prompt(prompt)
        context = context or RequestContext(prompt=prompt)
        key = buffered_cache_key(prompt)

        cached = await self._cached_response(key)
        if cached is not None:
            logger.info("Cache HIT")
            self._report(context, cached.provider, True, OutcomeStatus.SUCCESS, DeliveryMode.BUFFERED)
            return cached

        logger.info("Cache MISS")

        provider_name: str | None = None
        used_fallback = False
        failure: BackendError | None = None
        try:
            result: LLMResponse | None = None
            primary = self._registry.resolve(self._primary)

            if primary is not None:
                provider_name = primary.name
                try:
                    result = await primary.generate(prompt)
                except BackendError as err:
                    logger.warning(
                        "%s provider failed, falling back to %s: %s",
                        self._primary.value, self._secondary.value, err,
                    )
                    used_fallback = True
                    failure = err
            else:
                logger.warning(
                    "%s provider not configured, using %s",
                    self._primary.value, self._secondary.value,
                )
                used_fallback = True

            if result is None:
                secondary = self._registry.resolve(self._secondary)
                if secondary is None:
                    raise NoProviderAvailableError() from failure
                provider_name = secondary.name
                result = await secondary.generate(prompt)

        except Exception:
            self._report(context, provider_name, False, OutcomeStatus.FAILED, DeliveryMode.BUFFERED)
            raise

        await self._cache.set(key, result.to_cache_payload(), self._config.cache_ttl_seconds)

        status = OutcomeStatus.FALLBACK_TRIGGERED if used_fallback else OutcomeStatus.SUCCESS
        self._report(context, result.provider, False, status, DeliveryMode.BUFFERED)
        return result

    async def _cached_response(self, key: str) -> LLMResponse | None:
        payload = await self._cache.get(key)
        if payload is None:
            return None
        try:
            return LLMResponse.from_cache_payload(payload)
        except ValidationError:
            logger.warning("Unreadable cache entry %s treated as a miss", key[:12])
            return None

    # =========================================================================
    # STREAMING PATH
    # =========================================================================

    async def stream_with_fallback(
        self,
        prompt: str,
        context: RequestContext | None = None,
    ) -> AsyncIterator[str]:
        """Stream a response, replaying from cache or forwarding a backend stream.

        Fragments already delivered from a backend that fails partway are not
        retracted; the secondary's output follows them. Only the output of the
        backend that completed is cached.

        Args:
            prompt: Non-empty prompt text.
            context: Request tracking data. Created if omitted.

        Yields:
            Text fragments in order.

        Raises:
            InvalidPromptError: If the prompt is empty.
            NoProviderAvailableError: If no backend can start a stream.
            BackendError: If the stream fails with no secondary left to try.
        """
        _require_prompt(prompt)
        context = context or RequestContext(prompt=prompt)
        key = stream_cache_key(prompt)

        cached = await self._cache.get(key)
        if cached is not None:
            logger.info("Cache HIT")
            async for segment in replay_cached(cached, self._config.stream_replay_delay):
                yield segment
            self._report(context, CACHE_BACKEND, True, OutcomeStatus.SUCCESS, DeliveryMode.STREAM)
            return

        logger.info("Cache MISS")

        run: _StreamRun | None = None
        try:
            secondary = self._registry.resolve(self._secondary)
            run = self._open_stream(prompt, secondary)

            while run.state is not StreamState.COMPLETED:
                try:
                    async for chunk in run.stream:
                        run.buffer.append(chunk)
                        yield chunk
                    run.state = StreamState.COMPLETED
                except BackendError as err:
                    await _close(run.stream)
                    if secondary is None or run.provider is secondary:
                        run.state = StreamState.FAILED_PROPAGATE
                        raise
                    logger.warning(
                        "Primary stream failed, falling back to %s: %s",
                        self._secondary.value, err,
                    )
                    run.restart_on(secondary, prompt)

        except Exception:
            provider_name = run.provider.name if run else None
            self._report(context, provider_name, False, OutcomeStatus.FAILED, DeliveryMode.STREAM)
            raise
        finally:
            if run is not None and run.state is not StreamState.COMPLETED:
                await _close(run.stream)

        await self._cache.set(key, run.text, self._config.stream_cache_ttl_seconds)

        status = OutcomeStatus.FALLBACK_TRIGGERED if run.used_fallback else OutcomeStatus.SUCCESS
        self._report(context, run.provider.name, False, status, DeliveryMode.STREAM)

    def _open_stream(self, prompt: str, secondary: BaseProvider | None) -> _StreamRun:
        """Start the primary stream, or the secondary if the primary is unusable."""
        try:
            primary = self._registry.resolve(self._primary)
            if primary is not None:
                return _StreamRun(primary, primary.stream(prompt), StreamState.STREAMING_PRIMARY)
            logger.warning(
                "%s provider not configured, using %s",
                self._primary.value, self._secondary.value,
            )
            failure: BackendError | None = None
        except BackendError as err:
            logger.warning(
                "%s stream failed, falling back to %s: %s",
                self._primary.value, self._secondary.value, err,
            )
            failure = err

        if secondary is None:
            raise NoProviderAvailableError(streaming=True) from failure

        return _StreamRun(
            secondary,
            secondary.stream(prompt),
            StreamState.STREAMING_SECONDARY,
            used_fallback=True,
        )

    # =========================================================================
    # OBSERVABILITY
    # =========================================================================

    def _report(
        self,
        context: RequestContext,
        provider: str | None,
        cache_hit: bool,
        status: OutcomeStatus,
        mode: DeliveryMode,
    ) -> None:
        self._reporter.report(
            context,
            provider=provider,
            cache_hit=cache_hit,
            status=status,
            mode=mode,
        )
