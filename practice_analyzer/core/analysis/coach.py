"""
Practice coaching service.

This module contains the "coaching brain": it turns what the swimmer typed
into a request, hands it to a generation client, and turns the answer back
into domain objects. It's framework-agnostic and doesn't know about HTTP
or any particular LLM provider.
"""

import logging
from typing import Any, Optional, Protocol
from uuid import UUID, uuid4

from .errors import (
    InvalidInputError,
    MalformedResponseError,
    ServiceUnavailableError,
)
from .models import AnalysisPrompt, PracticeAnalysisRequest, SwimAnalysisResult
from .prompts import DEFAULT_MAX_LOG_CHARS, assemble_prompt
from .schema import decode_analysis


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class StructuredGenerationClient(Protocol):
    """
    Interface for LLM clients that can return schema-constrained JSON.

    Using a Protocol here means the coach doesn't know or care whether
    we're using Claude, Gemini, or a fake for testing. It just needs
    something that takes a prompt and a schema and gives back JSON text.

    Implementations make exactly one outbound call per invocation and raise
    ServiceUnavailableError when that call can't complete.
    """

    async def generate_json(
        self,
        user_prompt: str,
        system_instruction: str,
        output_schema: dict[str, Any],
    ) -> str:
        """Return the service's JSON payload as text."""
        ...


# ---------------------------------------------------------------------------
# Coach Service
# ---------------------------------------------------------------------------

class PracticeCoach:
    """
    Orchestrates one practice analysis: assemble, generate, decode.

    This is a service, not a data container. It holds its dependencies and
    nothing else; every analysis is independent and carries its own
    request id.
    """

    def __init__(
        self,
        client: StructuredGenerationClient,
        max_log_chars: Optional[int] = DEFAULT_MAX_LOG_CHARS,
    ) -> None:
        self._client = client
        self._max_log_chars = max_log_chars

    def build_prompt(self, request: PracticeAnalysisRequest) -> AnalysisPrompt:
        return assemble_prompt(request, max_log_chars=self._max_log_chars)

    async def analyze_practice(
        self,
        request: PracticeAnalysisRequest,
        request_id: Optional[UUID] = None,
    ) -> SwimAnalysisResult:
        """
        Analyze a practice log.

        Invalid input is rejected before any outbound call. Otherwise the
        client is called exactly once: no retries. Failures are logged
        with their kind and re-raised for the caller to present.
        """
        request_id = request_id or uuid4()
        log_context = {
            "request_id": str(request_id),
            "is_competition_week": request.is_competition_week,
            "has_weaknesses": request.has_weaknesses,
        }

        try:
            prompt = self.build_prompt(request)
        except InvalidInputError as e:
            logger.warning(
                "Rejected practice log",
                extra={**log_context, "kind": e.kind, "error": str(e)},
            )
            raise

        logger.info(
            "Requesting practice analysis",
            extra={
                **log_context,
                "log_chars": len(request.practice_log),
                "prompt_chars": len(prompt.user_prompt),
            },
        )

        try:
            payload = await self._client.generate_json(
                user_prompt=prompt.user_prompt,
                system_instruction=prompt.system_instruction,
                output_schema=prompt.output_schema,
            )
        except ServiceUnavailableError as e:
            logger.error(
                "Generation service call failed",
                extra={**log_context, "kind": e.kind, "error": str(e)},
            )
            raise
        except MalformedResponseError as e:
            logger.warning(
                "Generation service returned no payload",
                extra={**log_context, "kind": e.kind, "error": str(e)},
            )
            raise

        try:
            result = decode_analysis(payload)
        except MalformedResponseError as e:
            logger.warning(
                "Generation service returned unusable data",
                extra={
                    **log_context,
                    "kind": e.kind,
                    "error": str(e),
                    "payload_chars": len(payload),
                },
            )
            raise

        logger.info(
            "Practice analysis complete",
            extra={
                **log_context,
                "practice_count": len(result.analyzed_practices),
                "tip_count": len(result.coaching_tips),
                "total_yardage": result.total_yardage,
                "has_competition_advice": result.has_competition_advice,
                "has_weakness_tips": result.has_weakness_tips,
            },
        )

        return result
