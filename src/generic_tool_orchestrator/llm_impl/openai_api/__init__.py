"""Expose the OpenAI provider and its message/chunk translation helpers."""

from .core import OpenAIProvider
from .adapter import convert_messages, chunk_to_deltas, completion_to_deltas, tool_choice_to_openai

__all__ = [
    "OpenAIProvider",
    "convert_messages",
    "chunk_to_deltas",
    "completion_to_deltas",
    "tool_choice_to_openai",
]
