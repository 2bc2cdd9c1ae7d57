"""Tool definitions, the registry and the tool-call state machine.

Execution (``tools.execution``) and the bulk helpers (``tools.utilities``) work on
messages and are imported from their own modules.
"""

from .models import (
    ToolDefinition,
    ToolKind,
    FunctionKind,
    FunctionDefinitionKind,
    TransferKind,
    SubTaskKind,
    ApprovalState,
    ExecutionState,
    ToolCallClassification,
    ToolCallFunction,
    ToolCallRequest,
    ToolCallError,
    ToolCall,
)
from .registry import ToolRegistry
from .schema import SchemaValidator
from . import state

__all__ = [
    "ToolDefinition",
    "ToolKind",
    "FunctionKind",
    "FunctionDefinitionKind",
    "TransferKind",
    "SubTaskKind",
    "ApprovalState",
    "ExecutionState",
    "ToolCallClassification",
    "ToolCallFunction",
    "ToolCallRequest",
    "ToolCallError",
    "ToolCall",
    "ToolRegistry",
    "SchemaValidator",
    "state",
]
