"""
Google Gemini API client wrapper.

Gemini supports schema-constrained output natively: we pass the output
schema as response_json_schema and ask for application/json, and the
service validates its own answer before returning it. This wrapper
implements the StructuredGenerationClient protocol so the coach can use
Gemini or Claude interchangeably.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp
import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ...core.analysis.coach import StructuredGenerationClient
from ...core.analysis.errors import (
    MalformedResponseError,
    RateLimitExceeded,
    ServiceUnavailableError,
)


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# The async SDK sends through aiohttp when it is installed, httpx otherwise
TIMEOUT_ERRORS = (httpx.TimeoutException, asyncio.TimeoutError)
TRANSPORT_ERRORS = (httpx.HTTPError, aiohttp.ClientError)


@dataclass
class GeminiConfig:
    """Configuration for the Gemini client."""
    api_key: str
    model: str = DEFAULT_MODEL
    max_output_tokens: int = 4096
    temperature: float = 0.7
    timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("API key is required")
        if self.max_output_tokens < 1:
            raise ValueError("max_output_tokens must be positive")
        if not 0 <= self.temperature <= 2:
            raise ValueError("temperature must be between 0 and 2")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


class GeminiStructuredClient(StructuredGenerationClient):
    """Implementation of StructuredGenerationClient using Gemini."""

    def __init__(
        self,
        config: GeminiConfig,
        client: Optional[genai.Client] = None,
    ) -> None:
        self._config = config
        self._client = client or genai.Client(
            api_key=config.api_key,
            # HttpOptions takes milliseconds
            http_options=genai_types.HttpOptions(timeout=int(config.timeout_seconds * 1000)),
        )

    @property
    def model(self) -> str:
        return self._config.model

    async def generate_json(
        self,
        user_prompt: str,
        system_instruction: str,
        output_schema: dict[str, Any],
    ) -> str:
        config = genai_types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_json_schema=output_schema,
            candidate_count=1,
            max_output_tokens=self._config.max_output_tokens,
            temperature=self._config.temperature,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=self._config.model,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            if e.code == 429:
                logger.warning("Rate limit hit", extra={"error": str(e)})
                raise RateLimitExceeded("API rate limit exceeded. Please try again later.") from e
            logger.error("API error", extra={"error": str(e), "status": e.code})
            raise ServiceUnavailableError(f"API error ({e.code}): {e.message}") from e
        except TIMEOUT_ERRORS as e:
            logger.error("API request timed out", extra={"error": str(e)})
            raise ServiceUnavailableError("Generation service timed out") from e
        except TRANSPORT_ERRORS as e:
            logger.error("API connection failed", extra={"error": str(e)})
            raise ServiceUnavailableError("Could not reach generation service") from e

        text = response.text
        if not text:
            raise MalformedResponseError("Generation service returned an empty response", payload="")
        return text


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_gemini_client(
    api_key: Optional[str] = None,
    model: str = DEFAULT_MODEL,
    max_output_tokens: int = 4096,
    temperature: float = 0.7,
    timeout_seconds: float = 60.0,
) -> GeminiStructuredClient:
    """
    Factory function to create a configured client.

    Reads the API key from the parameter or the GEMINI_API_KEY
    environment variable.
    """
    key = api_key or os.environ.get("GEMINI_API_KEY")
    if not key:
        raise ValueError(
            "API key must be provided or set in GEMINI_API_KEY environment variable"
        )

    config = GeminiConfig(
        api_key=key,
        model=model,
        max_output_tokens=max_output_tokens,
        temperature=temperature,
        timeout_seconds=timeout_seconds,
    )
    return GeminiStructuredClient(config)
