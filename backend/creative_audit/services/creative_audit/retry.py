"""
Retry policy for Gemini calls: which failures are transient and how long to wait.
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from creative_audit.schemas.analysis import AnalysisResult
from creative_audit.services.creative_audit.errors import (
    AuditError,
    MalformedResponseError,
    ProviderError,
)

RETRYABLE_STATUSES = (429, 503, 504)
OVERLOAD_STATUSES = (429, 503)

QUOTA_MESSAGE_MARKERS = (
    "resource has been exhausted",
    "resource_exhausted",
    "quota exceeded",
)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one attempt: exactly one of result / error is set."""
    result: Optional[AnalysisResult] = None
    error: Optional[AuditError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_quota_message(message: Optional[str]) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in QUOTA_MESSAGE_MARKERS)


def is_retryable(status: Optional[int], message: Optional[str]) -> bool:
    """Transient provider failure: 429/503/504 or a quota/resource-exhausted message."""
    return status in RETRYABLE_STATUSES or is_quota_message(message)


def is_overload(error: ProviderError) -> bool:
    return error.status in OVERLOAD_STATUSES or is_quota_message(error.message)


def should_retry(error: AuditError, retry_malformed: bool) -> bool:
    if isinstance(error, ProviderError):
        return is_retryable(error.status, error.message)
    if isinstance(error, MalformedResponseError):
        return retry_malformed
    return False


def backoff_delay_ms(attempt_index: int, schedule: Sequence[int]) -> int:
    """Progressive schedule indexed by attempt, clamped to the last entry."""
    if not schedule:
        return 0
    return schedule[min(attempt_index, len(schedule) - 1)]


def select_delay_ms(error: AuditError, attempt_index: int, schedule: Sequence[int]) -> int:
    """Provider retry guidance wins; otherwise the schedule. Malformed responses retry immediately."""
    if isinstance(error, MalformedResponseError):
        return 0
    if isinstance(error, ProviderError):
        requested = error.retry_delay_ms
        if requested is not None:
            return requested
    return backoff_delay_ms(attempt_index, schedule)
