"""
Infrastructure layer - external service integrations.

Each subdirectory wraps one generation provider:
- anthropic: Claude API client
- gemini: Google Gemini API client

Both translate between the provider's format and our
StructuredGenerationClient protocol.
"""
