from creative_audit.schemas.analysis import (
    AgentFeedback,
    AnalysisResult,
    AnalyzeErrorResponse,
    AnalyzeRequest,
    FocalPoint,
    OBJECTION_TYPES,
    PersonaImpact,
    SENTIMENTS,
    SimulatedHeatmap,
)

__all__ = [
    "AgentFeedback",
    "AnalysisResult",
    "AnalyzeErrorResponse",
    "AnalyzeRequest",
    "FocalPoint",
    "OBJECTION_TYPES",
    "PersonaImpact",
    "SENTIMENTS",
    "SimulatedHeatmap",
]
