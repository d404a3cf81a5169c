"""
Parse and validate the model's JSON verdict. Malformed output is a full failure:
no partial recovery, no default result.
"""
import json
import logging
import uuid

from pydantic import ValidationError

from creative_audit.schemas.analysis import AnalysisResult
from creative_audit.services.creative_audit.errors import MalformedResponseError
from creative_audit.utils import strip_code_fence

logger = logging.getLogger(__name__)


def parse_analysis_response(raw: str, *, include_heatmap: bool) -> AnalysisResult:
    """
    Parse raw response text into an AnalysisResult.

    Args:
        raw: Text returned by Gemini.
        include_heatmap: True when the image path produced this response. The heatmap is then
            required; otherwise any heatmap in the response is dropped.

    Raises:
        MalformedResponseError: not JSON, not an object, or missing/invalid required fields.
    """
    text = strip_code_fence(raw or "")
    if not text:
        raise MalformedResponseError("Empty response from the analysis engine.", raw_response=raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Creative audit response JSON parse failed: %s", e)
        raise MalformedResponseError("Invalid response from the analysis engine (JSON parse error).", raw_response=raw) from e

    if not isinstance(data, dict):
        raise MalformedResponseError("Analysis engine returned JSON that is not an object.", raw_response=raw)

    if include_heatmap:
        if not data.get("simulated_heatmap"):
            raise MalformedResponseError("Analysis engine response is missing simulated_heatmap.", raw_response=raw)
    else:
        data.pop("simulated_heatmap", None)

    if not str(data.get("analysis_id") or "").strip():
        data["analysis_id"] = uuid.uuid4().hex
    data.pop("warning", None)

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        logger.warning("Creative audit response failed validation on: %s", ", ".join(fields))
        raise MalformedResponseError(
            f"Analysis engine response failed validation ({', '.join(fields)}).",
            raw_response=raw,
        ) from e
