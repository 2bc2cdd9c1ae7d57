"""Provider-agnostic message models for chat history."""

import time
import uuid
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..tools.models import ToolCall


def generate_unique_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    return int(time.time() * 1000)


class MessageMeta(BaseModel):
    """Generation metadata attached to assistant messages.

    Attributes:
        model: Model that produced the message.
        provider: Provider name.
        temperature: Sampling temperature used, if any.
        duration_ms: Wall time of the generation.
        input_tokens: Prompt tokens reported by the provider.
        output_tokens: Completion tokens reported by the provider.
        reasoning_tokens: Reasoning tokens, for providers that report them.
    """

    model: str
    provider: str
    temperature: Optional[float] = None
    duration_ms: int = 0
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None


class BaseMessage(BaseModel):
    """Base model for messages exchanged with an LLM.

    Attributes:
        id: Unique message id.
        created_at: Creation time in epoch milliseconds.
    """

    id: str = Field(default_factory=generate_unique_id)
    created_at: int = Field(default_factory=now_ms)


class SystemMessage(BaseMessage):
    """Message authored by the system to steer behavior."""

    role: Literal["system"] = "system"
    content: str


class UserMessage(BaseMessage):
    """Message authored by an end user."""

    role: Literal["user"] = "user"
    content: str


class AssistantMessage(BaseMessage):
    """Plain assistant reply without tool calls."""

    role: Literal["assistant"] = "assistant"
    content: str = ""
    reasoning_content: Optional[str] = None
    meta: Optional[MessageMeta] = None


class AssistantWithToolsMessage(BaseMessage):
    """Assistant reply that requests one or more tool calls. Content may be absent."""

    role: Literal["assistant_with_tools"] = "assistant_with_tools"
    content: Optional[str] = None
    reasoning_content: Optional[str] = None
    meta: Optional[MessageMeta] = None
    tool_calls: List[ToolCall]

    def with_tool_calls(self, tool_calls: List[ToolCall]) -> "AssistantWithToolsMessage":
        """Return a copy carrying ``tool_calls``; the message itself is left as is."""
        return self.model_copy(update={"tool_calls": list(tool_calls)})


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, AssistantWithToolsMessage],
    Field(discriminator="role"),
]
