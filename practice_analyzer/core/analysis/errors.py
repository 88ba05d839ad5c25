"""
Failure kinds for a practice analysis.

Three things can go wrong with an analysis, and they mean different things:
- The swimmer didn't give us anything to analyze (their fix).
- The generation service couldn't be reached (nobody's fix, try again).
- The service answered, but with data we can't use (also try again).

The last two look the same to the swimmer. They stay separate types so
logs and tests can tell them apart.
"""

from typing import Optional


INVALID_INPUT_MESSAGE = "Please enter your practice details first."

GENERIC_FAILURE_MESSAGE = (
    "Sorry, I couldn't analyze the practice log. "
    "Please try again or rephrase your input."
)


class PracticeAnalysisError(Exception):
    """Base class for every analysis failure."""

    kind = "analysis_error"
    user_message = GENERIC_FAILURE_MESSAGE


class InvalidInputError(PracticeAnalysisError):
    """The practice log can't be sent for analysis (empty or too long)."""

    kind = "invalid_input"

    def __init__(self, message: str = INVALID_INPUT_MESSAGE) -> None:
        super().__init__(message)
        self.user_message = message


class ServiceUnavailableError(PracticeAnalysisError):
    """The outbound call could not complete (timeout, connectivity, non-2xx)."""

    kind = "service_unavailable"


class RateLimitExceeded(ServiceUnavailableError):
    """The generation service rejected us for rate limiting."""
    pass


class MalformedResponseError(PracticeAnalysisError):
    """
    The call succeeded but the payload doesn't decode into a result.

    Keeps the raw payload around so it can be logged for diagnosis.
    """

    kind = "malformed_response"

    def __init__(self, message: str, payload: Optional[str] = None) -> None:
        super().__init__(message)
        self.payload = payload
