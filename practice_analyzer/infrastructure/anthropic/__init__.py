"""
Anthropic Claude API client wrapper.

Implements the StructuredGenerationClient protocol from core.analysis.coach.
"""

from .client import AnthropicConfig, AnthropicStructuredClient, create_anthropic_client

__all__ = ["AnthropicConfig", "AnthropicStructuredClient", "create_anthropic_client"]
