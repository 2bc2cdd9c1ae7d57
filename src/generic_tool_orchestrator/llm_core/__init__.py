"""Public exports for the tool-call orchestration core."""

from .exceptions import (
    LLMToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
    NoExecutorError,
    NotDirectlyExecutableError,
    ToolArgumentParseError,
    TransferPendingError,
    ConfigurationError,
    GenerationAbortError,
    is_abort_error,
)
from .logger import get_logger, setup_logging, mask_all
from .serialization import serialize, deserialize
from .cancellation import CancellationController, CancellationSignal
from .tools import (
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
    ToolRegistry,
    SchemaValidator,
)
from .messages import (
    BaseMessage,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    AssistantWithToolsMessage,
    Message,
    MessageMeta,
    Document,
    DocumentCollection,
    StreamEvent,
    GenerationError,
    generate_user_message,
    generate_system_message,
    generate_assistant_message,
    generate_messages,
)
from .base import LLMProvider, GenerationConfig
from .streaming import StreamAssembler, TextDelta, ReasoningDelta, ToolCallDelta, UsageDelta
from .tools.execution import ToolCallProcessor, ProcessCallsConfig, ProcessedToolCall
from .tools.utilities import ToolCallSummary

__all__ = [
    "LLMToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
    "NoExecutorError",
    "NotDirectlyExecutableError",
    "ToolArgumentParseError",
    "TransferPendingError",
    "ConfigurationError",
    "GenerationAbortError",
    "is_abort_error",
    "get_logger",
    "setup_logging",
    "mask_all",
    "serialize",
    "deserialize",
    "CancellationController",
    "CancellationSignal",
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
    "BaseMessage",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "AssistantWithToolsMessage",
    "Message",
    "MessageMeta",
    "Document",
    "DocumentCollection",
    "StreamEvent",
    "GenerationError",
    "generate_user_message",
    "generate_system_message",
    "generate_assistant_message",
    "generate_messages",
    "LLMProvider",
    "GenerationConfig",
    "StreamAssembler",
    "TextDelta",
    "ReasoningDelta",
    "ToolCallDelta",
    "UsageDelta",
    "ToolCallProcessor",
    "ProcessCallsConfig",
    "ProcessedToolCall",
    "ToolCallSummary",
]
