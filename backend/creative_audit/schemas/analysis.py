"""
Schemas for the creative audit: request ({text?, image?}) and the structured verdict.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


SENTIMENTS = ("positive", "neutral_positive", "neutral", "negative")
OBJECTION_TYPES = ("Trust", "Clarity", "Compliance", "Design")

Sentiment = Literal["positive", "neutral_positive", "neutral", "negative"]
ObjectionType = Literal["Trust", "Clarity", "Compliance", "Design"]


def _clamp_score(value):
    """Clamp a numeric score into [0, 100]; non-numeric values fail validation."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("score must be a number")
    return int(round(max(0, min(100, float(value)))))


def _clamp_coordinate(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("coordinate must be a number")
    return max(0.0, min(100.0, float(value)))


class AnalyzeRequest(BaseModel):
    """Submission from the dashboard: copy text, a base64 image (data URL or bare), or both."""
    text: Optional[str] = Field(None, description="Ad copy to audit")
    image: Optional[str] = Field(None, description="Base64 image, with or without data:<mime>;base64, prefix")


class FocalPoint(BaseModel):
    label: str
    x: float
    y: float

    @field_validator("x", "y", mode="before")
    @classmethod
    def clamp_coordinates(cls, v):
        """Coordinates are percentages from the top-left corner of the image."""
        return _clamp_coordinate(v)


class SimulatedHeatmap(BaseModel):
    focal_point_1: FocalPoint
    focal_point_2: FocalPoint
    ignored_area: str


class AgentFeedback(BaseModel):
    agent_name: str
    verdict: str
    score: int
    objection_type: ObjectionType

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        return _clamp_score(v)

    @field_validator("objection_type", mode="before")
    @classmethod
    def normalize_objection_type(cls, v):
        if isinstance(v, str):
            for known in OBJECTION_TYPES:
                if v.strip().lower() == known.lower():
                    return known
        return v


class PersonaImpact(BaseModel):
    persona_name: str
    impact_score: int

    @field_validator("impact_score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        return _clamp_score(v)


class AnalysisResult(BaseModel):
    """Structured verdict returned by the model and rendered by the dashboard."""
    analysis_id: str
    overall_score: int
    sentiment: Sentiment
    simulated_heatmap: Optional[SimulatedHeatmap] = None
    agents_feedback: List[AgentFeedback] = Field(..., min_length=1)
    persona_impact: List[PersonaImpact] = Field(..., min_length=1)
    actionable_tips: List[str]
    warning: Optional[str] = None

    @field_validator("overall_score", mode="before")
    @classmethod
    def clamp_overall_score(cls, v):
        return _clamp_score(v)

    @field_validator("sentiment", mode="before")
    @classmethod
    def normalize_sentiment(cls, v):
        if isinstance(v, str):
            return v.strip().lower().replace(" ", "_").replace("-", "_")
        return v


class AnalyzeErrorResponse(BaseModel):
    """Error body: user-presentable message plus a machine-distinguishable kind."""
    error: str
    kind: str
    original_kind: Optional[str] = None
    details: Optional[str] = None
