"""Collect concrete LLM provider implementations."""

from .openai_api import OpenAIProvider

__all__ = [
    "OpenAIProvider",
]
