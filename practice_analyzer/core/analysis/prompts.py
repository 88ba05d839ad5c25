"""
Prompt assembly for practice log analysis.

The prompts are here, not in config, because they're core business logic.
Changing them changes what the product does.

Each conditional section (competition prep, weakness work) is its own small
function that returns an empty string when it doesn't apply. That keeps the
inclusion rule for every clause testable on its own, and keeps the final
assembly a plain join.
"""

from typing import Optional

from .errors import InvalidInputError
from .models import AnalysisPrompt, PracticeAnalysisRequest
from .schema import SWIM_ANALYSIS_SCHEMA


DEFAULT_MAX_LOG_CHARS = 20_000


# ---------------------------------------------------------------------------
# Fixed prompt text
# ---------------------------------------------------------------------------

BREAKDOWN_INSTRUCTION = (
    "Analyze the following swim practice log. Break down each practice into "
    "warm-up, main set, and cooldown. Estimate total yardage for each."
)

OVERALL_ANALYSIS_REQUEST = "Then provide an overall analysis of the training"

COACHING_TIPS_REQUEST = "and actionable coaching tips."

PRACTICE_LOG_HEADER = "Practice Log:"

COACH_ROLE = (
    "You are a world-class swimming coach. Your task is to analyze a user's "
    "swim practice log. Structure the output according to the provided JSON "
    "schema. Provide insightful analysis on training load and intensity, and "
    "give concrete, actionable tips to help the swimmer improve."
)


# ---------------------------------------------------------------------------
# Conditional clauses
# ---------------------------------------------------------------------------

def competition_prompt_clause(is_competition_week: bool, events: str = "") -> str:
    """Competition request for the user prompt. Empty unless a meet is this week."""
    if not is_competition_week:
        return ""

    parts = ["The user has a competition THIS WEEK."]
    if events.strip():
        parts.append(f"They are swimming these events: {events.strip()}.")
    parts.append(
        "Provide specific advice on how to adjust this training, what to focus "
        "on (like race strategy for their specific events), and general "
        "competition preparation tips (tapering, nutrition, race day strategy)."
    )
    return " ".join(parts)


def competition_system_clause(is_competition_week: bool, events: str = "") -> str:
    """Competition emphasis for the system instruction."""
    if not is_competition_week:
        return ""

    parts = [
        "Pay special attention to providing competition preparation advice, "
        "as the user has a meet this week."
    ]
    if events.strip():
        parts.append(f"Tailor the advice to their specific events: {events.strip()}.")
    parts.append("Focus on tapering, mental prep, and race strategy.")
    return " ".join(parts)


def weakness_prompt_clause(weaknesses: str) -> str:
    if not weaknesses.strip():
        return ""
    return (
        f"The swimmer has identified these weaknesses: {weaknesses.strip()}. "
        "Provide specific, actionable drills and advice to help them improve "
        "in these areas."
    )


def weakness_system_clause(weaknesses: str) -> str:
    if not weaknesses.strip():
        return ""
    return (
        "The user has also listed their weaknesses. Provide a dedicated set of "
        "drills and advice to address these specific points."
    )


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def validate_practice_log(
    request: PracticeAnalysisRequest,
    max_chars: Optional[int] = DEFAULT_MAX_LOG_CHARS,
) -> None:
    """
    Reject logs we won't send.

    Empty logs get the "enter your practice" message. Over-long logs are
    rejected rather than silently truncated, so the swimmer knows the tail
    of their log wasn't analyzed.
    """
    if not request.has_practice_log:
        raise InvalidInputError()
    log_chars = len(request.practice_log)
    if max_chars is not None and log_chars > max_chars:
        raise InvalidInputError(
            f"Your practice log is too long ({log_chars:,} characters). "
            f"Please keep it under {max_chars:,} characters."
        )


def build_user_prompt(request: PracticeAnalysisRequest) -> str:
    sections = [
        BREAKDOWN_INSTRUCTION,
        OVERALL_ANALYSIS_REQUEST,
        COACHING_TIPS_REQUEST,
        competition_prompt_clause(request.is_competition_week, request.events),
        weakness_prompt_clause(request.weaknesses),
        PRACTICE_LOG_HEADER,
    ]
    # The log itself goes in verbatim, after a separator the model can't miss
    header = " ".join(section for section in sections if section)
    return f"{header}\n{request.practice_log}"


def build_system_instruction(request: PracticeAnalysisRequest) -> str:
    sections = [
        COACH_ROLE,
        competition_system_clause(request.is_competition_week, request.events),
        weakness_system_clause(request.weaknesses),
    ]
    return " ".join(section for section in sections if section)


def assemble_prompt(
    request: PracticeAnalysisRequest,
    max_log_chars: Optional[int] = DEFAULT_MAX_LOG_CHARS,
) -> AnalysisPrompt:
    """
    Build the full request for the generation service.

    Pure: same request in, same prompt out. The schema is the static
    SWIM_ANALYSIS_SCHEMA, never rebuilt per request.

    Raises InvalidInputError before anything leaves the process.
    """
    validate_practice_log(request, max_log_chars)

    return AnalysisPrompt(
        user_prompt=build_user_prompt(request),
        system_instruction=build_system_instruction(request),
        output_schema=SWIM_ANALYSIS_SCHEMA,
    )
