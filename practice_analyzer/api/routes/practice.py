"""
Practice analysis API endpoints.

Handles the core workflow:
1. Client posts a practice log plus optional competition/weakness context
2. Server builds the prompt and asks the generation service for a
   schema-constrained analysis
3. Client receives the structured analysis, or one human-readable error

The client only ever sees a message string on failure. The failure kind
stays in our logs.
"""

import logging
from typing import Any, Optional
from uuid import UUID, uuid4

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ...core.analysis.errors import InvalidInputError, PracticeAnalysisError
from ...core.analysis.models import PracticeAnalysisRequest
from ...core.analysis.schema import SWIM_ANALYSIS_SCHEMA, encode_analysis
from ..dependencies import AuthenticatedUser, PracticeCoachDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class AnalyzePracticeRequest(BaseModel):
    """What the swimmer filled in."""
    model_config = ConfigDict(populate_by_name=True)

    practice_log: str = Field(
        alias="practiceLog",
        description="Free-text log of one or more practices"
    )
    is_competition_week: bool = Field(
        default=False,
        alias="isCompetitionWeek",
        description="Whether the swimmer has a meet this week"
    )
    competition_events: str = Field(
        default="",
        alias="competitionEvents",
        description="Events being swum (ignored unless isCompetitionWeek)"
    )
    weaknesses: str = Field(
        default="",
        description="Self-identified weaknesses (optional)"
    )

    def to_domain(self) -> PracticeAnalysisRequest:
        return PracticeAnalysisRequest(
            practice_log=self.practice_log,
            is_competition_week=self.is_competition_week,
            competition_events=self.competition_events,
            weaknesses=self.weaknesses,
        )


class AnalyzedPracticeItem(BaseModel):
    """Single practice breakdown."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    warm_up: str = Field(alias="warmUp")
    main_set: str = Field(alias="mainSet")
    cool_down: str = Field(alias="coolDown")
    total_yardage: int = Field(alias="totalYardage")


class SwimAnalysisBody(BaseModel):
    """The structured analysis, in the same shape as the declared schema."""
    model_config = ConfigDict(populate_by_name=True)

    analyzed_practices: list[AnalyzedPracticeItem] = Field(alias="analyzedPractices")
    overall_analysis: str = Field(alias="overallAnalysis")
    coaching_tips: list[str] = Field(alias="coachingTips")
    competition_advice: Optional[list[str]] = Field(default=None, alias="competitionAdvice")
    weakness_improvement_tips: Optional[list[str]] = Field(
        default=None, alias="weaknessImprovementTips"
    )


class AnalyzePracticeResponse(BaseModel):
    """Successful analysis."""
    model_config = ConfigDict(populate_by_name=True)

    request_id: UUID = Field(alias="requestId", description="Identifier for this analysis")
    analysis: SwimAnalysisBody


class AnalysisErrorResponse(BaseModel):
    """Failed analysis: one message the UI can show as-is."""
    model_config = ConfigDict(populate_by_name=True)

    request_id: UUID = Field(alias="requestId", description="Identifier for this analysis")
    error: str = Field(description="Human-readable error message")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/analyze",
    response_model=AnalyzePracticeResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Analyze a practice log",
    description="Break down a free-text practice log and get coaching feedback",
    responses={
        status.HTTP_422_UNPROCESSABLE_ENTITY: {
            "description": "Practice log missing or too long",
            "model": AnalysisErrorResponse,
        },
        status.HTTP_502_BAD_GATEWAY: {
            "description": "Analysis could not be produced",
            "model": AnalysisErrorResponse,
        },
    },
)
async def analyze_practice(
    request: AnalyzePracticeRequest,
    api_key: AuthenticatedUser,
    coach: PracticeCoachDep,
) -> Any:
    """
    Analyze one practice log.

    This makes exactly one call to the generation service, and none at all
    if the log is empty. Service failures and unusable responses both come
    back as 502 with the same retry-suggesting message.
    """
    request_id = uuid4()

    try:
        result = await coach.analyze_practice(request.to_domain(), request_id=request_id)
    except InvalidInputError as e:
        return _error_response(request_id, status.HTTP_422_UNPROCESSABLE_ENTITY, e.user_message)
    except PracticeAnalysisError as e:
        logger.info(
            "Returning analysis failure to client",
            extra={"request_id": str(request_id), "kind": e.kind}
        )
        return _error_response(request_id, status.HTTP_502_BAD_GATEWAY, e.user_message)

    return AnalyzePracticeResponse(
        request_id=request_id,
        analysis=SwimAnalysisBody.model_validate(encode_analysis(result)),
    )


@router.get(
    "/schema",
    summary="Output schema",
    description="The schema the generation service is asked to follow",
)
async def get_output_schema() -> dict[str, Any]:
    return SWIM_ANALYSIS_SCHEMA


def _error_response(request_id: UUID, status_code: int, message: str) -> JSONResponse:
    body = AnalysisErrorResponse(request_id=request_id, error=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
    )
