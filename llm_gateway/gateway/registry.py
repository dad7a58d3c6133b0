"""Resolves backend names to configured provider instances."""

from typing import TYPE_CHECKING, Callable

from ..config import GatewayConfig
from ..exceptions import ProviderNotFoundError
from ..types import LLMProvider

if TYPE_CHECKING:
    from .providers.base import BaseProvider

# Builds a provider from (api_key, model)
ProviderFactory = Callable[[str, str | None], "BaseProvider"]

# Backends in the order the gateway tries them
PRIORITY: tuple[LLMProvider, LLMProvider] = (LLMProvider.OPENAI, LLMProvider.GEMINI)


class ProviderRegistry:
    """Maps backend names to adapters, driven by configured credentials.

    ``resolve`` returns None rather than raising when a backend has no
    credential, so "not configured" and "not available" look the same to
    the caller. A new adapter is built on every call.

    Example:
        ProviderRegistry.register("openai", lambda key, model: OpenAIProvider(key, model))

        registry = ProviderRegistry(GatewayConfig.from_env())
        provider = registry.resolve("openai")
    """

    _factories: dict[str, ProviderFactory] = {}

    def __init__(
        self,
        config: GatewayConfig,
        factories: dict[str, ProviderFactory] | None = None,
    ):
        """Create registry.

        Args:
            config: Source of credentials and model names.
            factories: Per-instance factories that override registered ones.
        """
        self._config = config
        self._overrides = dict(factories or {})

    @classmethod
    def register(cls, name: str | LLMProvider, factory: ProviderFactory) -> None:
        """Register the default factory for a backend."""
        key = name.value if isinstance(name, LLMProvider) else name
        cls._factories[key] = factory

    @classmethod
    def list_providers(cls) -> list[str]:
        """List registered backend names."""
        return list(cls._factories.keys())

    @property
    def config(self) -> GatewayConfig:
        return self._config

    def resolve(self, name: str | LLMProvider) -> "BaseProvider | None":
        """Build the adapter for a backend, or None when it has no credential.

        Raises:
            ProviderNotFoundError: If no factory is known for the name.
        """
        key = name.value if isinstance(name, LLMProvider) else name
        factory = self._overrides.get(key) or self._factories.get(key)
        if factory is None:
            raise ProviderNotFoundError(key, sorted({*self._factories, *self._overrides}))

        api_key = self._config.credential_for(key)
        if not api_key:
            return None

        return factory(api_key, self._config.model_for(key))

    def available(self) -> list[LLMProvider]:
        """Configured backends, in priority order."""
        return [name for name in PRIORITY if self._config.credential_for(name)]
