"""
Creative audit orchestration: validate -> assemble -> invoke -> parse, wrapped in a
bounded retry loop with provider-aware backoff and a one-shot text-only fallback.

Each attempt yields an AttemptOutcome; the loop inspects it instead of relying on
exceptions for control flow. States: Attempting(n) -> Succeeded | FailedTerminal.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from creative_audit.config import AuditConfig
from creative_audit.schemas.analysis import AnalysisResult
from creative_audit.services.creative_audit.errors import (
    AuditError,
    ConfigurationError,
    FallbackExhaustedError,
    MalformedResponseError,
    ProviderError,
    ProviderGenericError,
    ProviderOverloadedError,
    describe,
)
from creative_audit.services.creative_audit.parser import parse_analysis_response
from creative_audit.services.creative_audit.payload import AuditPayload, assemble_payload
from creative_audit.services.creative_audit.prompts import DEGRADED_MODE_WARNING
from creative_audit.services.creative_audit.retry import (
    AttemptOutcome,
    is_overload,
    select_delay_ms,
    should_retry,
)
from creative_audit.services.creative_audit.validation import has_text, validate_submission

logger = logging.getLogger(__name__)

Invoker = Callable[[AuditPayload], Awaitable[str]]
Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class RetryState:
    attempt_index: int = 0
    last_error: Optional[AuditError] = None


def build_invoker(config: AuditConfig) -> Invoker:
    """Gemini-backed invoker built from injected configuration."""
    if not config.api_key:
        raise ConfigurationError()
    from creative_audit.services.gemini_service import GeminiAuditService

    service = GeminiAuditService(
        api_key=config.api_key,
        model=config.model_name,
        timeout_seconds=config.request_timeout_seconds,
    )
    return service.generate


async def run_attempt(invoke: Invoker, payload: AuditPayload, *, include_heatmap: bool) -> AttemptOutcome:
    """One invoke + parse. Audit errors become an error outcome; cancellation propagates."""
    try:
        raw = await invoke(payload)
        return AttemptOutcome(result=parse_analysis_response(raw, include_heatmap=include_heatmap))
    except AuditError as e:
        return AttemptOutcome(error=e)


def classify_terminal(error: AuditError, *, attempts: int, exhausted: bool) -> AuditError:
    """Map the last attempt's error to the user-facing terminal error."""
    if isinstance(error, ProviderError):
        if exhausted and is_overload(error):
            return ProviderOverloadedError(cause=error, attempts=attempts)
        return ProviderGenericError(
            f"Analysis failed after {attempts} attempt(s). {error.message}",
            cause=error,
            attempts=attempts,
        )
    if exhausted and isinstance(error, MalformedResponseError):
        return ProviderGenericError(
            f"Analysis failed after {attempts} attempt(s). {error.user_message}",
            cause=error,
            attempts=attempts,
        )
    return error


async def run_creative_audit(
    text: Optional[str],
    image: Optional[str],
    config: AuditConfig,
    *,
    invoke: Optional[Invoker] = None,
    sleep: Sleeper = asyncio.sleep,
) -> AnalysisResult:
    """
    Run one creative audit.

    Args:
        text: Ad copy, optional.
        image: Base64 image (data URL or bare), optional.
        config: Injected settings (API key, model, retry budget, backoff schedule).
        invoke: Model invoker; defaults to a GeminiAuditService built from config.
        sleep: Async wait used between attempts.

    Returns:
        AnalysisResult; ``warning`` is set when only the text-only fallback succeeded.

    Raises:
        AuditError: one of EmptyInputError, InvalidImageError, ConfigurationError,
            ProviderOverloadedError, MalformedResponseError, ProviderGenericError,
            FallbackExhaustedError.
    """
    validate_submission(text, image)
    payload = assemble_payload(text, image)
    if invoke is None:
        invoke = build_invoker(config)

    image_path = payload.has_image
    max_attempts = max(1, config.max_retries)
    state = RetryState()

    while True:
        outcome = await run_attempt(invoke, payload, include_heatmap=image_path)
        if outcome.ok:
            if state.attempt_index:
                logger.info("Creative audit succeeded on attempt %d/%d", state.attempt_index + 1, max_attempts)
            return outcome.result

        state.last_error = outcome.error
        retryable = should_retry(outcome.error, config.retry_malformed_responses)
        logger.warning(
            "Creative audit attempt %d/%d failed (retryable=%s): %s",
            state.attempt_index + 1,
            max_attempts,
            retryable,
            describe(outcome.error),
        )
        if retryable and state.attempt_index < max_attempts - 1:
            delay_ms = select_delay_ms(outcome.error, state.attempt_index, config.backoff_schedule_ms)
            if delay_ms:
                logger.info(
                    "Retrying in %.1fs (attempt %d/%d)",
                    delay_ms / 1000,
                    state.attempt_index + 2,
                    max_attempts,
                )
                await sleep(delay_ms / 1000)
            state.attempt_index += 1
            continue
        break

    terminal = classify_terminal(
        state.last_error,
        attempts=state.attempt_index + 1,
        exhausted=retryable,
    )

    if image_path and has_text(text) and state.attempt_index >= 1:
        return await _text_only_fallback(invoke, text, image, terminal)

    logger.error("Creative audit failed: %s", describe(terminal))
    raise terminal


async def _text_only_fallback(
    invoke: Invoker,
    text: Optional[str],
    image: Optional[str],
    original: AuditError,
) -> AnalysisResult:
    """Resubmit without the image once; on failure surface the image-path error."""
    logger.warning("Falling back to text-only audit after persistent image-path failures")
    payload = assemble_payload(text, image, include_image=False)
    outcome = await run_attempt(invoke, payload, include_heatmap=False)
    if outcome.ok:
        return outcome.result.model_copy(update={"warning": DEGRADED_MODE_WARNING})
    logger.error(
        "Text-only fallback failed: %s (image-path error: %s)",
        describe(outcome.error),
        describe(original),
    )
    raise FallbackExhaustedError(original=original, fallback_error=outcome.error)

