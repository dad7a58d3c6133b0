"""Gateway configuration.

All credentials and tuning knobs live on an explicit ``GatewayConfig`` object
that is passed to the registry and the gateway. ``GatewayConfig.from_env()``
builds one from process environment variables.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, field_validator

from .types import LLMProvider

# Environment variable holding the credential for each backend
CREDENTIAL_ENV_VARS: dict[LLMProvider, str] = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.GEMINI: "GEMINI_API_KEY",
}


class GatewayConfig(BaseModel):
    """Configuration for the gateway and its backends."""

    # Credentials
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    gemini_api_key: str | None = Field(default=None, description="Gemini API key")

    # Models
    openai_model: str = Field(default="gpt-4o-mini")
    gemini_model: str = Field(default="gemini-1.5-flash")

    # Cache
    cache_ttl_seconds: int = Field(default=3600, gt=0, description="Buffered result TTL")
    stream_cache_ttl_seconds: int = Field(default=60, gt=0, description="Streamed text TTL")
    cache_max_entries: int | None = Field(default=10_000, gt=0)

    # Streaming
    stream_replay_delay_ms: float = Field(
        default=20, ge=0, description="Delay between fragments replayed from cache"
    )

    # Logging
    prompt_preview_length: int = Field(default=50, gt=0)
    log_level: str = Field(default="INFO")

    @field_validator("openai_api_key", "gemini_api_key", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GatewayConfig":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Validated GatewayConfig.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {
            f"{provider.value}_api_key": env.get(var)
            for provider, var in CREDENTIAL_ENV_VARS.items()
        }

        optional = {
            "openai_model": "OPENAI_MODEL",
            "gemini_model": "GEMINI_MODEL",
            "cache_ttl_seconds": "CACHE_TTL_SECONDS",
            "stream_cache_ttl_seconds": "STREAM_CACHE_TTL_SECONDS",
            "stream_replay_delay_ms": "STREAM_REPLAY_DELAY_MS",
            "log_level": "LOG_LEVEL",
        }
        for field_name, var in optional.items():
            if env.get(var):
                values[field_name] = env[var]

        return cls(**values)

    def credential_for(self, provider: LLMProvider | str) -> str | None:
        """Return the configured credential for a backend, or None."""
        name = provider.value if isinstance(provider, LLMProvider) else provider
        if name == LLMProvider.OPENAI.value:
            return self.openai_api_key
        if name == LLMProvider.GEMINI.value:
            return self.gemini_api_key
        return None

    def model_for(self, provider: LLMProvider | str) -> str | None:
        """Return the configured model name for a backend, or None."""
        name = provider.value if isinstance(provider, LLMProvider) else provider
        if name == LLMProvider.OPENAI.value:
            return self.openai_model
        if name == LLMProvider.GEMINI.value:
            return self.gemini_model
        return None

    @property
    def stream_replay_delay(self) -> float:
        """Replay delay in seconds."""
        return self.stream_replay_delay_ms / 1000
