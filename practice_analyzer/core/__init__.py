"""
Core business logic for practice analysis.

This module is framework-agnostic - it doesn't import FastAPI or any LLM
SDK. This separation means we can test the coaching logic in isolation
and swap providers without touching the prompts.
"""
