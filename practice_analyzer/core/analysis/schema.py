"""
The output contract between us and the generation service.

Two halves of the same contract live here:
- SWIM_ANALYSIS_SCHEMA is what we *declare* to the service so it can
  constrain its own output. It's a plain JSON-Schema-style dict, so any
  provider client can pass it along without knowing about swimming.
- decode_analysis() is what we *enforce* when the answer comes back. The
  service is supposed to honor the schema, but we don't take its word for it.

Decoding is strict on purpose. A string where an integer should be, a
missing required field, or a boolean pretending to be a number all count
as a malformed response. We never guess a coercion.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedResponseError
from .models import AnalyzedPractice, SwimAnalysisResult


# ---------------------------------------------------------------------------
# Declared schema
# ---------------------------------------------------------------------------

PRACTICE_FIELDS = ["title", "warmUp", "mainSet", "coolDown", "totalYardage"]

REQUIRED_FIELDS = ["analyzedPractices", "overallAnalysis", "coachingTips"]

OPTIONAL_FIELDS = ["competitionAdvice", "weaknessImprovementTips"]


SWIM_ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "analyzedPractices": {
            "type": "array",
            "description": "A list of analyzed swim practices from the user's input.",
            "items": {
                "type": "object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "A title for the practice, like 'Monday - Freestyle Focus'.",
                    },
                    "warmUp": {
                        "type": "string",
                        "description": "The warm-up portion of the practice.",
                    },
                    "mainSet": {
                        "type": "string",
                        "description": "The main set of the practice.",
                    },
                    "coolDown": {
                        "type": "string",
                        "description": "The cool-down portion of the practice.",
                    },
                    "totalYardage": {
                        "type": "integer",
                        "description": "The estimated total yardage/meterage of the practice.",
                    },
                },
                "required": PRACTICE_FIELDS,
            },
        },
        "overallAnalysis": {
            "type": "string",
            "description": (
                "A brief overall analysis of the training log, highlighting "
                "training load, intensity distribution, and areas for improvement."
            ),
        },
        "coachingTips": {
            "type": "array",
            "description": (
                "Actionable tips for the swimmer to improve their training, "
                "technique, or recovery."
            ),
            "items": {"type": "string"},
        },
        "competitionAdvice": {
            "type": "array",
            "description": (
                "Specific advice for tapering and preparation if a competition "
                "is mentioned. Focus on rest, nutrition, and race strategy, "
                "tailored to the user's specific events if provided."
            ),
            "items": {"type": "string"},
        },
        "weaknessImprovementTips": {
            "type": "array",
            "description": (
                "Specific drills and advice tailored to the swimmer's "
                "self-identified weaknesses."
            ),
            "items": {"type": "string"},
        },
    },
    "required": REQUIRED_FIELDS,
}


# ---------------------------------------------------------------------------
# Payload models (wire format)
# ---------------------------------------------------------------------------

class _PracticePayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    title: str
    warm_up: str = Field(alias="warmUp")
    main_set: str = Field(alias="mainSet")
    cool_down: str = Field(alias="coolDown")
    total_yardage: int = Field(alias="totalYardage", ge=0)


class _AnalysisPayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    analyzed_practices: list[_PracticePayload] = Field(alias="analyzedPractices")
    overall_analysis: str = Field(alias="overallAnalysis", min_length=1)
    coaching_tips: list[str] = Field(alias="coachingTips")
    competition_advice: Optional[list[str]] = Field(default=None, alias="competitionAdvice")
    weakness_improvement_tips: Optional[list[str]] = Field(
        default=None, alias="weaknessImprovementTips"
    )


# ---------------------------------------------------------------------------
# Decoding / encoding
# ---------------------------------------------------------------------------

def decode_analysis(payload: str) -> SwimAnalysisResult:
    """
    Turn the service's JSON text into a SwimAnalysisResult.

    Raises MalformedResponseError for invalid JSON, missing required
    fields, wrong types, or values the domain model rejects.
    """
    try:
        parsed = _AnalysisPayload.model_validate_json(payload)
    except ValidationError as e:
        errors = e.errors()
        if errors and errors[0]["type"] == "json_invalid":
            raise MalformedResponseError(
                f"Response is not valid JSON: {errors[0]['msg']}",
                payload=payload,
            ) from e
        raise MalformedResponseError(
            f"Response does not match the analysis schema: {_summarize(errors)}",
            payload=payload,
        ) from e

    try:
        return SwimAnalysisResult(
            analyzed_practices=[
                AnalyzedPractice(
                    title=p.title,
                    warm_up=p.warm_up,
                    main_set=p.main_set,
                    cool_down=p.cool_down,
                    total_yardage=p.total_yardage,
                )
                for p in parsed.analyzed_practices
            ],
            overall_analysis=parsed.overall_analysis,
            coaching_tips=list(parsed.coaching_tips),
            competition_advice=parsed.competition_advice,
            weakness_improvement_tips=parsed.weakness_improvement_tips,
        )
    except ValueError as e:
        raise MalformedResponseError(
            f"Response failed validation: {e}", payload=payload
        ) from e


def encode_analysis(result: SwimAnalysisResult) -> dict[str, Any]:
    """
    The wire form of a result, using the schema's field names.

    Optional sections that were never sent stay absent rather than
    becoming empty lists.
    """
    encoded: dict[str, Any] = {
        "analyzedPractices": [
            {
                "title": p.title,
                "warmUp": p.warm_up,
                "mainSet": p.main_set,
                "coolDown": p.cool_down,
                "totalYardage": p.total_yardage,
            }
            for p in result.analyzed_practices
        ],
        "overallAnalysis": result.overall_analysis,
        "coachingTips": list(result.coaching_tips),
    }
    if result.competition_advice is not None:
        encoded["competitionAdvice"] = list(result.competition_advice)
    if result.weakness_improvement_tips is not None:
        encoded["weaknessImprovementTips"] = list(result.weakness_improvement_tips)
    return encoded


def _summarize(errors: list[dict[str, Any]], limit: int = 3) -> str:
    """Compact 'location: message' list for logs and exception text."""
    parts = []
    for err in errors[:limit]:
        location = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        parts.append(f"{location}: {err.get('msg', 'invalid')}")
    if len(errors) > limit:
        parts.append(f"... {len(errors) - limit} more")
    return "; ".join(parts)
