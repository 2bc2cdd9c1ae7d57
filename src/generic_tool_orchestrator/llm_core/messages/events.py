"""Events yielded while a response is streamed. Never persisted."""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..tools.models import ToolCall
from .models import MessageMeta

StopReason = Literal["completed", "userCancelled", "generationError"]


class GenerationError(BaseModel):
    """Why a streamed generation ended early."""

    message: str
    type: str


class ChunkEvent(BaseModel):
    type: Literal["chunk"] = "chunk"
    content: str
    chunk_id: str


class ReasoningChunkEvent(BaseModel):
    type: Literal["reasoningChunk"] = "reasoningChunk"
    content: str
    chunk_id: str


class _ResponseEventBase(BaseModel):
    type: Literal["response"] = "response"
    message_id: str
    reasoning_content: Optional[str] = None
    meta: MessageMeta
    stop_reason: StopReason = "completed"
    error: Optional[GenerationError] = None


class AssistantResponseEvent(_ResponseEventBase):
    """Terminal event for a reply without tool calls."""

    role: Literal["assistant"] = "assistant"
    content: str = ""


class AssistantWithToolsResponseEvent(_ResponseEventBase):
    """Terminal event for a reply carrying tool calls."""

    role: Literal["assistant_with_tools"] = "assistant_with_tools"
    content: Optional[str] = None
    tool_calls: List[ToolCall]


ResponseEvent = Union[AssistantResponseEvent, AssistantWithToolsResponseEvent]


class ToolCallStartedEvent(BaseModel):
    type: Literal["toolCallStarted"] = "toolCallStarted"
    tool_call: ToolCall


class ToolCallCompletedEvent(BaseModel):
    type: Literal["toolCallCompleted"] = "toolCallCompleted"
    tool_call: ToolCall


StreamEvent = Annotated[
    Union[
        ChunkEvent,
        ReasoningChunkEvent,
        AssistantResponseEvent,
        AssistantWithToolsResponseEvent,
        ToolCallStartedEvent,
        ToolCallCompletedEvent,
    ],
    Field(union_mode="left_to_right"),
]
