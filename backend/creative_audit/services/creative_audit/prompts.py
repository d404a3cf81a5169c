"""
Fixed system instruction and response schema for the creative audit.
The schema is handed to Gemini as a response constraint so the output stays parseable.
"""
from typing import Any, Dict

from creative_audit.schemas.analysis import OBJECTION_TYPES, SENTIMENTS

PROMPT_VERSION = "2.0"

# (name, lens)
AGENT_PANEL = [
    ("Phil", "Trust"),
    ("Dra. Camila", "Brand"),
    ("Toninho", "Clarity"),
    ("Juliana", "Compliance"),
    ("Klebão", "Urgency"),
]

PERSONA_SEGMENTS = [
    "Impulsivos de Mobile",
    "Buscadores de Autoridade",
    "Analíticos/Céticos",
    "Fãs de Estética/Design",
    "Consumidores de Massa",
]

IMAGE_MIME_TYPE = "image/png"

DEGRADED_MODE_WARNING = (
    "Visual analysis failed (error or safety block). Results are based on the text only."
)

_AGENT_LINES = "\n".join(f"- {name} ({lens})" for name, lens in AGENT_PANEL)
_PERSONA_LINES = "\n".join(f'{i}. "{name}"' for i, name in enumerate(PERSONA_SEGMENTS, start=1))
_OBJECTIONS = ", ".join(OBJECTION_TYPES)

SYSTEM_PROMPT = f"""# SYSTEM PROMPT: IMPACT SIMULATOR ENGINE (v{PROMPT_VERSION})

ROLE:
You are the creative and document audit engine. You orchestrate a panel of synthetic agents that audit marketing material and predict its impact on real customer personas.

## 1. AGENT PANEL
Review the input strictly through the eyes of these agents (one agents_feedback entry each, objection_type one of: {_OBJECTIONS}):
{_AGENT_LINES}

## 2. TARGET PERSONAS
Score the impact (0-100) on these 5 customer segments, one persona_impact entry each, in this order:
{_PERSONA_LINES}

## 3. VISUAL AI (HEATMAP)
When an image is provided, identify the two points of highest attention (focal points).
For each point give a short label and approximate (x, y) coordinates as percentages (0-100) from the top-left corner of the image.
Also describe the area most likely to be ignored.

Output: JSON strictly following the schema. Answer in the language of the submitted copy."""


def _focal_point_schema() -> Dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            "label": {"type": "STRING"},
            "x": {"type": "NUMBER"},
            "y": {"type": "NUMBER"},
        },
        "required": ["label", "x", "y"],
    }


def build_response_schema(with_heatmap: bool) -> Dict[str, Any]:
    """
    Response schema in Gemini's OpenAPI subset.
    simulated_heatmap is required only when an image part is sent.
    """
    required = [
        "analysis_id",
        "overall_score",
        "sentiment",
        "agents_feedback",
        "persona_impact",
        "actionable_tips",
    ]
    properties: Dict[str, Any] = {
        "analysis_id": {"type": "STRING"},
        "overall_score": {"type": "INTEGER", "minimum": 0, "maximum": 100},
        "sentiment": {"type": "STRING", "enum": list(SENTIMENTS)},
        "agents_feedback": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "agent_name": {"type": "STRING"},
                    "verdict": {"type": "STRING"},
                    "score": {"type": "INTEGER", "minimum": 0, "maximum": 100},
                    "objection_type": {"type": "STRING", "enum": list(OBJECTION_TYPES)},
                },
                "required": ["agent_name", "verdict", "score", "objection_type"],
            },
        },
        "persona_impact": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "persona_name": {"type": "STRING"},
                    "impact_score": {"type": "INTEGER", "minimum": 0, "maximum": 100},
                },
                "required": ["persona_name", "impact_score"],
            },
            "description": "Impact for the 5 personas: " + ", ".join(PERSONA_SEGMENTS),
        },
        "actionable_tips": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
        },
    }
    if with_heatmap:
        properties["simulated_heatmap"] = {
            "type": "OBJECT",
            "properties": {
                "focal_point_1": _focal_point_schema(),
                "focal_point_2": _focal_point_schema(),
                "ignored_area": {"type": "STRING"},
            },
            "required": ["focal_point_1", "focal_point_2", "ignored_area"],
        }
        required.append("simulated_heatmap")
    return {"type": "OBJECT", "properties": properties, "required": required}
