"""
Creative audit API.
POST /api/analyze
Body: { text?: str, image?: base64 (data URL or bare) }.
Returns the structured verdict; failures are returned as { error, kind } by the
AuditError handler registered in main.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from creative_audit.config import AuditConfig, get_settings
from creative_audit.schemas.analysis import AnalysisResult, AnalyzeErrorResponse, AnalyzeRequest
from creative_audit.services.creative_audit.orchestrator import Invoker, run_creative_audit

router = APIRouter(tags=["creative-audit"])
logger = logging.getLogger(__name__)


def get_audit_config() -> AuditConfig:
    return AuditConfig.from_settings(get_settings())


def get_invoker() -> Optional[Invoker]:
    """Model invoker override; None means a Gemini service built from the audit config."""
    return None


@router.post(
    "/api/analyze",
    response_model=AnalysisResult,
    responses={
        400: {"model": AnalyzeErrorResponse},
        429: {"model": AnalyzeErrorResponse},
        500: {"model": AnalyzeErrorResponse},
        502: {"model": AnalyzeErrorResponse},
    },
)
async def analyze_creative(
    body: AnalyzeRequest,
    config: AuditConfig = Depends(get_audit_config),
    invoke: Optional[Invoker] = Depends(get_invoker),
):
    """Audit ad copy and/or a creative image with one Gemini call (retried on transient failures)."""
    logger.info(
        "Creative audit request: text=%s chars, image=%s",
        len(body.text or ""),
        "yes" if (body.image or "").strip() else "no",
    )
    result = await run_creative_audit(body.text, body.image, config, invoke=invoke)
    if result.warning:
        logger.info("Creative audit %s completed in degraded mode", result.analysis_id)
    return result
