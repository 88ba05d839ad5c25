"""
Google Gemini API client wrapper.

Implements the StructuredGenerationClient protocol from core.analysis.coach.
"""

from .client import GeminiConfig, GeminiStructuredClient, create_gemini_client

__all__ = ["GeminiConfig", "GeminiStructuredClient", "create_gemini_client"]
