"""
Creative audit: one Gemini call per submission returns a structured verdict
(scores, agent panel feedback, persona impact, heatmap focal points, tips).
Retries transient provider failures; falls back to text-only when the image path keeps failing.
"""
from creative_audit.services.creative_audit.orchestrator import run_creative_audit

__all__ = ["run_creative_audit"]
