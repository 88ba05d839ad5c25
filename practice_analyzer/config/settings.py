"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like api_keys), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Swim Practice Analyzer API"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1,dev-key-2",
        description="Comma-separated API keys. Using a list enables key rotation without downtime."
    )

    # Generation provider
    generation_provider: Literal["anthropic", "gemini"] = Field(
        default="anthropic",
        description="Which generation service analyzes practice logs."
    )
    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for the single outbound generation call. No retries follow it."
    )

    # Anthropic Configuration
    anthropic_api_key: str = Field(
        default="",
        description="Claude API key. Required when generation_provider is anthropic."
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model to use. Sonnet 4 provides good balance of capability and cost."
    )
    anthropic_max_tokens: int = Field(
        default=4096,
        description="Max tokens for Claude responses. A multi-practice breakdown can be long."
    )
    anthropic_temperature: float = Field(
        default=0.7,
        description="Temperature for Claude. 0.7 allows some creativity in coaching advice."
    )

    # Gemini Configuration
    gemini_api_key: str = Field(
        default="",
        description="Gemini API key. Required when generation_provider is gemini."
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model to use."
    )
    gemini_max_output_tokens: int = Field(
        default=4096,
        description="Max output tokens for Gemini responses."
    )
    gemini_temperature: float = Field(
        default=0.7,
        description="Temperature for Gemini."
    )

    # Application Behavior
    max_practice_log_chars: int = Field(
        default=20_000,
        gt=0,
        description="Longest practice log we accept. Longer logs are rejected, not truncated."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def generation_model(self) -> str:
        """Model identifier for the selected provider."""
        if self.generation_provider == "gemini":
            return self.gemini_model
        return self.anthropic_model

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set for the selected provider.

        Returns list of missing required fields.
        This is separate from Pydantic validation because requirements
        depend on which provider is selected.
        """
        missing = []

        if self.generation_provider == "anthropic" and not self.anthropic_api_key:
            missing.append("ANTHROPIC_API_KEY")
        if self.generation_provider == "gemini" and not self.gemini_api_key:
            missing.append("GEMINI_API_KEY")

        if not self.api_keys_list:
            missing.append("API_KEYS")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
