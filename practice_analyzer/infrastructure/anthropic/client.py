"""
Anthropic Claude API client wrapper.

This module provides a thin wrapper around the Anthropic SDK that:
1. Implements our StructuredGenerationClient protocol
2. Gets schema-constrained JSON out of Claude by forcing a single tool call
   whose input_schema is our output schema
3. Translates SDK errors into our error taxonomy
4. Enables easy mocking for tests

The wrapper is intentionally thin. It knows Anthropic's API format but
nothing about swimming.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import anthropic
from anthropic import APIConnectionError, APIError, APIStatusError, APITimeoutError, RateLimitError

from ...core.analysis.coach import StructuredGenerationClient
from ...core.analysis.errors import (
    MalformedResponseError,
    RateLimitExceeded,
    ServiceUnavailableError,
)


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"

STRUCTURED_OUTPUT_TOOL = "record_swim_analysis"


@dataclass
class AnthropicConfig:
    """
    Configuration for the Anthropic client.

    Validated at construction time so a bad setting fails at startup,
    not halfway through a swimmer's request.
    """
    api_key: str
    model: str = DEFAULT_MODEL
    max_tokens: int = 4096
    temperature: float = 0.7  # Some creativity in coaching advice
    timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("API key is required")
        if self.max_tokens < 1:
            raise ValueError("max_tokens must be positive")
        if not 0 <= self.temperature <= 1:
            raise ValueError("temperature must be between 0 and 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


class AnthropicStructuredClient(StructuredGenerationClient):
    """
    Implementation of StructuredGenerationClient using Claude.

    Claude has no response-schema switch, but a forced tool call does the
    same job: the tool's input_schema is our output schema, and the tool
    input Claude produces is the JSON we want.
    """

    def __init__(
        self,
        config: AnthropicConfig,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ) -> None:
        self._config = config
        # One attempt per analysis, so the SDK's own retries are off
        self._client = client or anthropic.AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
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
        """
        Ask Claude for one structured analysis and return it as JSON text.

        The response is not validated here; that's the decoder's job.
        """
        try:
            response = await self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                system=system_instruction,
                messages=[
                    {"role": "user", "content": user_prompt}
                ],
                tools=[self._build_tool(output_schema)],
                tool_choice={"type": "tool", "name": STRUCTURED_OUTPUT_TOOL},
            )
        except RateLimitError as e:
            logger.warning("Rate limit hit", extra={"error": str(e)})
            raise RateLimitExceeded("API rate limit exceeded. Please try again later.") from e
        except APITimeoutError as e:
            logger.error("API request timed out", extra={"error": str(e)})
            raise ServiceUnavailableError("Generation service timed out") from e
        except APIConnectionError as e:
            logger.error("API connection failed", extra={"error": str(e)})
            raise ServiceUnavailableError("Could not reach generation service") from e
        except APIStatusError as e:
            logger.error("API error", extra={"error": str(e), "status": e.status_code})
            raise ServiceUnavailableError(f"API error ({e.status_code}): {e.message}") from e
        except APIError as e:
            logger.error("API error", extra={"error": str(e)})
            raise ServiceUnavailableError(f"API error: {e.message}") from e

        return self._extract_json_payload(response)

    def _build_tool(self, output_schema: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": STRUCTURED_OUTPUT_TOOL,
            "description": "Record the structured analysis of the swimmer's practice log.",
            "input_schema": output_schema,
        }

    def _extract_json_payload(self, response) -> str:
        """
        Pull the JSON payload out of the response.

        Prefers the forced tool call. If Claude answered in plain text
        anyway, that text is returned as-is and the decoder decides
        whether it's usable.
        """
        if not response.content:
            raise MalformedResponseError("Generation service returned an empty response", payload="")

        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == STRUCTURED_OUTPUT_TOOL:
                return json.dumps(block.input)

        text_blocks = [
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        ]
        if not text_blocks:
            raise MalformedResponseError("Generation service returned no usable content", payload="")

        logger.warning(
            "Model answered with text instead of the structured tool call",
            extra={"stop_reason": getattr(response, "stop_reason", None)},
        )
        return "\n".join(text_blocks)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_anthropic_client(
    api_key: Optional[str] = None,
    model: str = DEFAULT_MODEL,
    max_tokens: int = 4096,
    temperature: float = 0.7,
    timeout_seconds: float = 60.0,
) -> AnthropicStructuredClient:
    """
    Factory function to create a configured client.

    Reads the API key from the parameter or the ANTHROPIC_API_KEY
    environment variable.
    """
    key = api_key or os.environ.get("ANTHROPIC_API_KEY")
    if not key:
        raise ValueError(
            "API key must be provided or set in ANTHROPIC_API_KEY environment variable"
        )

    config = AnthropicConfig(
        api_key=key,
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        timeout_seconds=timeout_seconds,
    )
    return AnthropicStructuredClient(config)
