"""Generic Tool Orchestrator - provider-agnostic tool calling with approval, budgets and cancellation."""

from .llm_core import (
    ToolRegistry,
    ToolDefinition,
    ToolCall,
    ToolCallProcessor,
    StreamAssembler,
    LLMProvider,
    GenerationConfig,
    CancellationController,
    CancellationSignal,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    AssistantWithToolsMessage,
    generate_user_message,
    generate_system_message,
    generate_assistant_message,
    generate_messages,
)
from .llm_impl.openai_api import OpenAIProvider

__all__ = [
    "ToolRegistry",
    "ToolDefinition",
    "ToolCall",
    "ToolCallProcessor",
    "StreamAssembler",
    "LLMProvider",
    "GenerationConfig",
    "CancellationController",
    "CancellationSignal",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "AssistantWithToolsMessage",
    "generate_user_message",
    "generate_system_message",
    "generate_assistant_message",
    "generate_messages",
    "OpenAIProvider",
]
