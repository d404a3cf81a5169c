"""
Gemini invoker for the creative audit.
One call per invocation: sends the assembled parts with the system instruction and
response schema, returns the raw response text. Never retries; every failure
leaves as a ProviderError carrying status, message and structured details.
"""
import asyncio
import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from creative_audit.services.creative_audit.errors import ConfigurationError, ProviderError
from creative_audit.services.creative_audit.payload import AuditPayload, ImagePart, TextPart

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
TIMEOUT_STATUS = 504
NETWORK_ERROR_STATUS = 503


class GeminiAuditService:
    """Service for running one creative audit call against Google Gemini."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout_seconds: Optional[float] = 60.0,
        client: Optional[Any] = None,
    ):
        self.api_key = (api_key or "").strip() or None
        self.model = model or DEFAULT_MODEL
        self.timeout_seconds = timeout_seconds
        self._client = client

    def is_configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError()
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def build_contents(self, payload: AuditPayload) -> list:
        parts = []
        for part in payload.parts:
            if isinstance(part, TextPart):
                parts.append(types.Part(text=part.text))
            elif isinstance(part, ImagePart):
                parts.append(
                    types.Part(
                        inline_data=types.Blob(
                            data=part.data,
                            mime_type=part.mime_type,
                        )
                    )
                )
        return [types.Content(role="user", parts=parts)]

    def build_config(self, payload: AuditPayload) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=payload.system_instruction,
            response_mime_type="application/json",
            response_schema=payload.response_schema,
        )

    async def generate(self, payload: AuditPayload) -> str:
        """
        Send the payload to Gemini and return the raw response text ("" when the model
        returned no text, e.g. a safety block).

        Raises:
            ConfigurationError: no API key and no injected client.
            ProviderError: API error (status from the response), timeout (504) or
                transport failure (503).
        """
        client = self.client
        call = client.aio.models.generate_content(
            model=self.model,
            contents=self.build_contents(payload),
            config=self.build_config(payload),
        )
        try:
            if self.timeout_seconds:
                response = await asyncio.wait_for(call, timeout=self.timeout_seconds)
            else:
                response = await call
        except genai_errors.APIError as e:
            logger.warning("Gemini API call failed: status=%s message=%s", e.code, (e.message or "")[:200])
            raise ProviderError(
                message=e.message or str(e),
                status=e.code,
                details=e.details,
            ) from e
        except asyncio.TimeoutError as e:
            logger.warning("Gemini API call timed out after %ss", self.timeout_seconds)
            raise ProviderError(
                message=f"Gemini request timed out after {self.timeout_seconds}s",
                status=TIMEOUT_STATUS,
            ) from e
        except httpx.TransportError as e:
            logger.warning("Gemini network error: %s", e)
            raise ProviderError(
                message=f"Network error contacting Gemini: {e}",
                status=NETWORK_ERROR_STATUS,
            ) from e
        except Exception as e:
            logger.error("Unexpected Gemini client failure: %s: %s", type(e).__name__, e)
            raise ProviderError(message=f"{type(e).__name__}: {e}") from e

        text = (getattr(response, "text", None) or "").strip()
        logger.info("Received Gemini response (%s chars, model=%s)", len(text), self.model)
        return text
