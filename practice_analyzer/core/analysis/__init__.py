"""
Practice log analysis logic.

Contains the coaching service, prompt assembly, the output schema,
and the domain models.
"""

from .models import (
    AnalysisPrompt,
    AnalyzedPractice,
    PracticeAnalysisRequest,
    SwimAnalysisResult,
)
from .errors import (
    InvalidInputError,
    MalformedResponseError,
    PracticeAnalysisError,
    RateLimitExceeded,
    ServiceUnavailableError,
)
from .coach import PracticeCoach, StructuredGenerationClient
from .prompts import assemble_prompt
from .schema import SWIM_ANALYSIS_SCHEMA, decode_analysis, encode_analysis

__all__ = [
    "AnalysisPrompt",
    "AnalyzedPractice",
    "PracticeAnalysisRequest",
    "SwimAnalysisResult",
    "InvalidInputError",
    "MalformedResponseError",
    "PracticeAnalysisError",
    "RateLimitExceeded",
    "ServiceUnavailableError",
    "PracticeCoach",
    "StructuredGenerationClient",
    "assemble_prompt",
    "SWIM_ANALYSIS_SCHEMA",
    "decode_analysis",
    "encode_analysis",
]
