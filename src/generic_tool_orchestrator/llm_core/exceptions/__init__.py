"""Export the exception hierarchy used across registration, streaming, and execution paths."""

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
]
