"""Tool-related data models."""

from .tool_definition import (
    ToolDefinition,
    ToolKind,
    FunctionKind,
    FunctionDefinitionKind,
    TransferKind,
    SubTaskKind,
    ToolContext,
    ToolExecutor,
)
from .tool_call import (
    ApprovalState,
    ExecutionState,
    ToolCallClassification,
    ToolCallFunction,
    ToolCallRequest,
    ToolCallError,
    ToolCall,
    OPEN_EXECUTION_STATES,
    FAILED_EXECUTION_STATES,
)

__all__ = [
    "ToolDefinition",
    "ToolKind",
    "FunctionKind",
    "FunctionDefinitionKind",
    "TransferKind",
    "SubTaskKind",
    "ToolContext",
    "ToolExecutor",
    "ApprovalState",
    "ExecutionState",
    "ToolCallClassification",
    "ToolCallFunction",
    "ToolCallRequest",
    "ToolCallError",
    "ToolCall",
    "OPEN_EXECUTION_STATES",
    "FAILED_EXECUTION_STATES",
]
