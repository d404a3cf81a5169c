"""
Error taxonomy for the creative audit.

Every failure leaving the orchestrator is one of the ``AuditError`` kinds below.
``ProviderError`` is the tagged error produced at the Gemini call boundary; the
retry controller classifies it into one of the terminal kinds.
"""
import re
from typing import Any, Dict, Optional


RETRY_DELAY_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s)\s*$")


class AuditError(Exception):
    """Base class: carries a machine-distinguishable kind and a user-presentable message."""

    kind = "audit_error"
    http_status = 500
    default_message = "The creative audit failed."

    def __init__(self, message: Optional[str] = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class EmptyInputError(AuditError):
    kind = "empty_input"
    http_status = 400
    default_message = "At least text or an image must be provided."


class InvalidImageError(AuditError):
    kind = "invalid_image"
    http_status = 400
    default_message = "The submitted image is not valid base64 data."


class ConfigurationError(AuditError):
    kind = "configuration"
    http_status = 500
    default_message = "Gemini API key is not configured on the server."


class ProviderError(AuditError):
    """Raw failure from one Gemini call: HTTP-ish status, provider message, structured details."""

    kind = "provider_raw"
    http_status = 502

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details

    @property
    def retry_delay_ms(self) -> Optional[int]:
        """Delay requested by the provider (google.rpc.RetryInfo), in ms, or None."""
        for entry in _iter_detail_entries(self.details):
            if "RetryInfo" not in str(entry.get("@type", "")):
                continue
            delay = parse_retry_delay(entry.get("retryDelay"))
            if delay is not None:
                return delay
        return None

    def __repr__(self) -> str:
        return f"ProviderError(status={self.status!r}, message={self.message!r})"


class ProviderOverloadedError(AuditError):
    kind = "provider_overloaded"
    http_status = 429
    default_message = "The analysis service is temporarily overloaded. Please wait a minute and try again."

    def __init__(self, message: Optional[str] = None, cause: Optional[ProviderError] = None, attempts: int = 0):
        super().__init__(message)
        self.cause = cause
        self.attempts = attempts


class MalformedResponseError(AuditError):
    kind = "malformed_response"
    http_status = 502
    default_message = "Invalid response from the analysis engine."

    def __init__(self, message: Optional[str] = None, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


class ProviderGenericError(AuditError):
    kind = "provider_error"
    http_status = 502

    def __init__(self, message: str, cause: Optional[AuditError] = None, attempts: int = 1):
        super().__init__(message)
        self.cause = cause
        self.attempts = attempts
        status = getattr(cause, "status", None)
        if isinstance(status, int) and 400 <= status < 600:
            self.http_status = status


class FallbackExhaustedError(AuditError):
    """Text-only fallback also failed; presents the original image-path error."""

    kind = "fallback_exhausted"

    def __init__(self, original: AuditError, fallback_error: AuditError):
        super().__init__(original.user_message)
        self.original = original
        self.fallback_error = fallback_error
        self.http_status = original.http_status

    @property
    def original_kind(self) -> str:
        return self.original.kind


def parse_retry_delay(value: Any) -> Optional[int]:
    """Parse a provider retry delay like ``"33s"``, ``"500ms"`` or ``"1.5s"`` into milliseconds."""
    if not isinstance(value, str):
        return None
    match = RETRY_DELAY_PATTERN.match(value)
    if not match:
        return None
    amount = float(match.group(1))
    if match.group(2) == "s":
        amount *= 1000
    return int(round(amount))


def _iter_detail_entries(details: Any):
    """Yield RetryInfo-style dicts from either the full error body or its details list."""
    if isinstance(details, dict):
        inner = details.get("error") if isinstance(details.get("error"), dict) else details
        details = inner.get("details")
    if isinstance(details, list):
        for entry in details:
            if isinstance(entry, dict):
                yield entry


def describe(error: AuditError) -> Dict[str, Any]:
    """Flat dict of an error for structured log lines."""
    out: Dict[str, Any] = {"kind": error.kind, "message": error.user_message}
    if isinstance(error, ProviderError):
        out["status"] = error.status
    if isinstance(error, FallbackExhaustedError):
        out["fallback_kind"] = error.fallback_error.kind
    return out
