"""Re-export the provider contract and the per-request generation settings."""

from .base import LLMProvider, GenerationConfig, ToolChoice

__all__ = [
    "LLMProvider",
    "GenerationConfig",
    "ToolChoice",
]
