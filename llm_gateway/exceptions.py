"""Custom exceptions for the LLM gateway."""


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    pass


class InvalidPromptError(GatewayError, ValueError):
    """Raised when a prompt is empty or whitespace-only."""

    def __init__(self) -> None:
        super().__init__("Prompt must be a non-empty string")


# =============================================================================
# Backend Exceptions
# =============================================================================


class BackendError(GatewayError):
    """Raised when a configured backend call fails.

    Covers network, auth, quota and malformed-response failures. The gateway
    recovers from one of these by falling back to the secondary backend.
    """

    def __init__(self, provider: str, message: str, original_error: Exception | None = None):
        self.provider = provider
        self.original_error = original_error
        super().__init__(f"Provider '{provider}' error: {message}")


class NoProviderAvailableError(GatewayError):
    """Raised when no backend is configured or usable for a request."""

    def __init__(self, streaming: bool = False):
        self.streaming = streaming
        scope = " for streaming" if streaming else ""
        super().__init__(
            f"No LLM provider available{scope}. "
            "Configure OPENAI_API_KEY and/or GEMINI_API_KEY."
        )


class ProviderNotFoundError(GatewayError):
    """Raised when a requested backend name is not registered."""

    def __init__(self, provider: str, available: list[str] | None = None):
        self.provider = provider
        names = ", ".join(available) if available else "openai, gemini"
        super().__init__(f"Provider '{provider}' not found. Available providers: {names}")
