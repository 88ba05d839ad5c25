"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden with fakes in tests
- Configuration is centralized

Each dependency is a function that FastAPI calls when needed. Nothing here
is shared between requests, so concurrent analyses never see each other's
state.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings, get_settings
from ..core.analysis.coach import PracticeCoach, StructuredGenerationClient
from ..infrastructure.anthropic.client import create_anthropic_client
from ..infrastructure.gemini.client import create_gemini_client

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: str = Security(api_key_header),
) -> str:
    """
    Validate API key from request header.

    Raises 403 if key is invalid or missing.
    """
    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.api_keys_list:
        logger.warning(
            "Invalid API key attempt",
            extra={"key_prefix": api_key[:8]}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_generation_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StructuredGenerationClient:
    """
    Provide the generation client for the configured provider.

    Raises 503 when the provider's credentials aren't configured, so a
    misconfigured deployment fails loudly without attempting a call.
    """
    try:
        if settings.generation_provider == "gemini":
            return create_gemini_client(
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
                max_output_tokens=settings.gemini_max_output_tokens,
                temperature=settings.gemini_temperature,
                timeout_seconds=settings.request_timeout_seconds,
            )

        return create_anthropic_client(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
            temperature=settings.anthropic_temperature,
            timeout_seconds=settings.request_timeout_seconds,
        )
    except ValueError as e:
        logger.error(
            "Generation client misconfigured",
            extra={"provider": settings.generation_provider, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis service is not configured.",
        )


def get_practice_coach(
    settings: Annotated[Settings, Depends(get_settings)],
    client: Annotated[StructuredGenerationClient, Depends(get_generation_client)],
) -> PracticeCoach:
    """
    Provide a PracticeCoach for this request.

    The coach is stateless, so a new instance per request costs nothing.
    """
    coach = PracticeCoach(
        client=client,
        max_log_chars=settings.max_practice_log_chars,
    )

    logger.debug(
        "Created PracticeCoach instance",
        extra={"provider": settings.generation_provider}
    )

    return coach


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
AuthenticatedUser = Annotated[str, Depends(verify_api_key)]
PracticeCoachDep = Annotated[PracticeCoach, Depends(get_practice_coach)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
