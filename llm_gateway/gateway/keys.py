"""Cache key derivation.

Buffered and streamed requests use independent keys, so the same prompt
never shares a cache entry across delivery modes. Each key is a namespace
prefix plus a SHA-256 hex digest.
"""

import hashlib

BUFFERED_NAMESPACE = "buffered"
STREAM_NAMESPACE = "stream"


def _digest(namespace: str, text: str) -> str:
    return f"{namespace}:{hashlib.sha256(text.encode('utf-8')).hexdigest()}"


def normalize_prompt(prompt: str) -> str:
    """Trim and case-fold a prompt."""
    return prompt.strip().casefold()


def buffered_cache_key(prompt: str) -> str:
    """Key for a buffered result: digest of the trimmed prompt, case preserved."""
    return _digest(BUFFERED_NAMESPACE, prompt.strip())


def stream_cache_key(prompt: str) -> str:
    """Key for streamed text: digest of the normalized prompt."""
    return _digest(STREAM_NAMESPACE, normalize_prompt(prompt))
