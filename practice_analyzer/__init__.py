"""
Swim Practice Analyzer - AI coaching feedback for free-text practice logs.

This package contains the complete application:
- core: Framework-agnostic business logic
- infrastructure: Generation service integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
