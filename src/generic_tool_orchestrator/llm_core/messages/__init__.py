"""Expose provider-agnostic message, document and stream event types."""

from .models import (
    BaseMessage,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    AssistantWithToolsMessage,
    Message,
    MessageMeta,
    generate_unique_id,
)
from .documents import Document, DocumentCollection
from .events import (
    StreamEvent,
    StopReason,
    GenerationError,
    ChunkEvent,
    ReasoningChunkEvent,
    ResponseEvent,
    AssistantResponseEvent,
    AssistantWithToolsResponseEvent,
    ToolCallStartedEvent,
    ToolCallCompletedEvent,
)
from .helpers import (
    generate_user_message,
    generate_system_message,
    generate_assistant_message,
    generate_messages,
)

__all__ = [
    "BaseMessage",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "AssistantWithToolsMessage",
    "Message",
    "MessageMeta",
    "generate_unique_id",
    "Document",
    "DocumentCollection",
    "StreamEvent",
    "StopReason",
    "GenerationError",
    "ChunkEvent",
    "ReasoningChunkEvent",
    "ResponseEvent",
    "AssistantResponseEvent",
    "AssistantWithToolsResponseEvent",
    "ToolCallStartedEvent",
    "ToolCallCompletedEvent",
    "generate_user_message",
    "generate_system_message",
    "generate_assistant_message",
    "generate_messages",
]
