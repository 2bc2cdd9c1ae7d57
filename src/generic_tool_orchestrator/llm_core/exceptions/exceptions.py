"""
Custom exception classes for the tool orchestration engine.

This module defines the hierarchy of exceptions raised while registering,
resolving, and executing tools, plus the configuration and abort errors
raised around provider interactions.

Tool-level failures during call processing are captured as tool-call state
rather than raised; the exception class name becomes the ``type`` recorded
on the tool call's error.
"""


class LLMToolError(Exception):
    """Base exception for all tool-related errors."""

    pass


class ToolRegistrationError(LLMToolError):
    """Raised when there is an error registering or unregistering a tool."""

    pass


class ToolNotFoundError(LLMToolError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolExecutionError(LLMToolError):
    """Raised when a tool fails during execution."""

    pass


class ToolValidationError(LLMToolError):
    """Raised when tool parameters or definition are invalid."""

    pass


class NoExecutorError(LLMToolError):
    """Raised when a tool without a bound executor is asked to execute."""

    pass


class NotDirectlyExecutableError(LLMToolError):
    """Raised when a transfer or sub-task tool is asked to execute.

    These tools are resolved by an external delegation mechanism.
    """

    pass


class ToolArgumentParseError(LLMToolError):
    """Raised when streamed tool-call arguments are not valid JSON."""

    pass


class TransferPendingError(LLMToolError):
    """Raised when tool calls awaiting delegation are handed to the call processor."""

    pass


class ConfigurationError(Exception):
    """Raised when the library is called with an inconsistent configuration."""

    pass


class GenerationAbortError(Exception):
    """Raised when a generation request is cancelled before it produced anything."""

    name = "AbortError"
    code = "GENERATION_ABORTED"
    is_abort_error = True

    def __init__(self, message: str = "Generation was cancelled") -> None:
        super().__init__(message)
        self.message = message


def is_abort_error(error: BaseException) -> bool:
    """Check whether an exception represents a user cancellation.

    Args:
        error: The exception to inspect.

    Returns:
        True for GenerationAbortError or any exception flagged with ``is_abort_error``.
    """
    return isinstance(error, GenerationAbortError) or getattr(error, "is_abort_error", False) is True
