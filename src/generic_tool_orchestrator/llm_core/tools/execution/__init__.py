"""Tool-call execution under error and call budgets."""

from .call_processor import (
    ToolCallProcessor,
    ProcessCallsConfig,
    ProcessedToolCall,
    NextToolCall,
    REJECTION_RESULT,
)

__all__ = [
    "ToolCallProcessor",
    "ProcessCallsConfig",
    "ProcessedToolCall",
    "NextToolCall",
    "REJECTION_RESULT",
]
