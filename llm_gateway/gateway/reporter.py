"""Per-request outcome reporting."""

import logging
from collections import deque

from ..types import DeliveryMode, OutcomeRecord, OutcomeStatus, RequestContext
from ..utils.logging import StructuredLogger

logger = logging.getLogger(__name__)


def truncate_prompt(prompt: str, max_len: int = 50) -> str:
    """Trimmed prompt preview, cut to ``max_len`` characters plus an ellipsis."""
    text = prompt.strip()
    return text if len(text) <= max_len else text[:max_len] + "..."


class OutcomeReporter:
    """Side-effect sink that records one outcome per gateway request.

    Records are logged at INFO through a StructuredLogger and kept in a
    bounded history. ``report`` never raises; a record that could not be
    logged is counted in ``dropped``.
    """

    def __init__(
        self,
        structured_logger: StructuredLogger | None = None,
        preview_length: int = 50,
        history_size: int = 1000,
    ):
        self._log = structured_logger or StructuredLogger("outcome")
        self._preview_length = preview_length
        self._history: deque[OutcomeRecord] = deque(maxlen=history_size)
        self._dropped = 0

    @property
    def dropped(self) -> int:
        """Number of records that failed to be logged."""
        return self._dropped

    def report(
        self,
        context: RequestContext,
        provider: str | None,
        cache_hit: bool,
        status: OutcomeStatus,
        mode: DeliveryMode,
    ) -> OutcomeRecord | None:
        """Record the outcome of a request.

        Returns:
            The record, or None if it could not be built or logged.
        """
        try:
            record = OutcomeRecord(
                request_id=context.request_id,
                prompt=truncate_prompt(context.prompt, self._preview_length),
                provider=provider,
                cache_hit=cache_hit,
                latency_ms=context.elapsed_ms(),
                status=status,
                mode=mode,
            )
            self._history.append(record)
            self._log.info("request outcome", **record.to_log_fields())
            return record
        except Exception:
            self._dropped += 1
            logger.debug("Outcome record dropped", exc_info=True)
            return None

    def history(self, limit: int | None = None) -> list[OutcomeRecord]:
        """Get recorded outcomes, oldest first."""
        records = list(self._history)
        if limit is not None:
            records = records[-limit:] if limit > 0 else []
        return records

    def reset(self) -> None:
        self._history.clear()
        self._dropped = 0
