"""
Shared fixtures for creative audit tests: a valid verdict, a tiny PNG and scripted fakes
standing in for Gemini and the backoff wait.
"""
import copy
import json

import pytest

from creative_audit.config import AuditConfig
from creative_audit.services.creative_audit.errors import ProviderError

# 1x1 transparent PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

VALID_VERDICT = {
    "analysis_id": "aud-001",
    "overall_score": 72,
    "sentiment": "neutral_positive",
    "simulated_heatmap": {
        "focal_point_1": {"label": "Headline", "x": 50, "y": 20},
        "focal_point_2": {"label": "CTA button", "x": 70, "y": 85},
        "ignored_area": "Footer legal text",
    },
    "agents_feedback": [
        {"agent_name": "Phil", "verdict": "Claim needs proof.", "score": 60, "objection_type": "Trust"},
        {"agent_name": "Dra. Camila", "verdict": "Brand tone is consistent.", "score": 80, "objection_type": "Design"},
        {"agent_name": "Toninho", "verdict": "Offer is clear.", "score": 85, "objection_type": "Clarity"},
        {"agent_name": "Juliana", "verdict": "Missing terms for the discount.", "score": 55, "objection_type": "Compliance"},
        {"agent_name": "Klebão", "verdict": "Urgency works.", "score": 78, "objection_type": "Clarity"},
    ],
    "persona_impact": [
        {"persona_name": "Impulsivos de Mobile", "impact_score": 88},
        {"persona_name": "Buscadores de Autoridade", "impact_score": 52},
        {"persona_name": "Analíticos/Céticos", "impact_score": 40},
        {"persona_name": "Fãs de Estética/Design", "impact_score": 66},
        {"persona_name": "Consumidores de Massa", "impact_score": 81},
    ],
    "actionable_tips": ["Add the discount terms.", "Show a customer testimonial."],
}


class FakeInvoker:
    """
    Scripted stand-in for GeminiAuditService.generate.
    Each entry is returned (str) or raised (exception); the last entry repeats.
    A separate script can be given for text-only payloads.
    """

    def __init__(self, script, text_only_script=None):
        self.script = list(script)
        self.text_only_script = list(text_only_script) if text_only_script is not None else None
        self.payloads = []

    @property
    def calls(self):
        return len(self.payloads)

    @property
    def image_calls(self):
        return sum(1 for p in self.payloads if p.has_image)

    @property
    def text_only_calls(self):
        return sum(1 for p in self.payloads if not p.has_image)

    async def __call__(self, payload):
        self.payloads.append(payload)
        script = self.script
        if self.text_only_script is not None and not payload.has_image:
            script = self.text_only_script
        step = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(step, BaseException):
            raise step
        return step


class RecordingSleep:
    """Async sleep replacement that records requested delays (seconds) without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def verdict():
    return copy.deepcopy(VALID_VERDICT)


@pytest.fixture
def verdict_json(verdict):
    return json.dumps(verdict, ensure_ascii=False)


@pytest.fixture
def text_verdict_json(verdict):
    verdict.pop("simulated_heatmap")
    return json.dumps(verdict, ensure_ascii=False)


@pytest.fixture
def png_base64():
    return PNG_BASE64


@pytest.fixture
def png_data_url():
    return "data:image/png;base64," + PNG_BASE64


@pytest.fixture
def audit_config():
    return AuditConfig(
        api_key="test-key",
        model_name="gemini-test",
        max_retries=4,
        backoff_schedule_ms=(2000, 5000, 15000, 35000),
        request_timeout_seconds=5.0,
        retry_malformed_responses=False,
    )


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fake_invoker():
    return FakeInvoker


@pytest.fixture
def quota_error():
    def _make(retry_delay=None, status=429):
        details = [{"@type": "type.googleapis.com/google.rpc.ErrorInfo", "reason": "RATE_LIMIT_EXCEEDED"}]
        if retry_delay:
            details.append({"@type": "type.googleapis.com/google.rpc.RetryInfo", "retryDelay": retry_delay})
        body = {
            "error": {
                "code": status,
                "message": "Resource has been exhausted (e.g. check quota).",
                "status": "RESOURCE_EXHAUSTED",
                "details": details,
            }
        }
        return ProviderError(body["error"]["message"], status=status, details=body)
    return _make
