"""Translation between the unified message model and the OpenAI chat format."""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from openai.types.chat import ChatCompletion, ChatCompletionChunk

from generic_tool_orchestrator.llm_core.logger import get_logger
from generic_tool_orchestrator.llm_core.messages import (
    AssistantMessage,
    AssistantWithToolsMessage,
    Message,
    SystemMessage,
    UserMessage,
)
from generic_tool_orchestrator.llm_core.serialization import serialize
from generic_tool_orchestrator.llm_core.streaming import (
    ReasoningDelta,
    StreamDelta,
    TextDelta,
    ToolCallDelta,
    UsageDelta,
)
from generic_tool_orchestrator.llm_core.tools.models import ExecutionState

logger = get_logger(__name__)

_PLAIN_TOOL_CHOICES = ("auto", "none", "required")


def convert_messages(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    """Convert unified messages to OpenAI chat message dicts.

    Every tool call of an ``assistant_with_tools`` message that reached a terminal state
    is followed by a ``tool`` message carrying its result or error message.
    """
    converted: List[Dict[str, Any]] = []
    for msg in messages:
        if isinstance(msg, SystemMessage):
            converted.append({"role": "system", "content": msg.content})
        elif isinstance(msg, UserMessage):
            converted.append({"role": "user", "content": msg.content})
        elif isinstance(msg, AssistantWithToolsMessage):
            converted.append(
                {
                    "role": "assistant",
                    "content": msg.content,
                    "tool_calls": [
                        {
                            "id": call.request.id,
                            "type": "function",
                            "function": {"name": call.name, "arguments": serialize(call.arguments)},
                        }
                        for call in msg.tool_calls
                    ],
                }
            )
            for call in msg.tool_calls:
                if call.execution_state == ExecutionState.COMPLETED:
                    converted.append({"role": "tool", "tool_call_id": call.request.id, "content": serialize(call.result)})
                elif call.error is not None:
                    converted.append({"role": "tool", "tool_call_id": call.request.id, "content": call.error.message})
        elif isinstance(msg, AssistantMessage):
            converted.append({"role": "assistant", "content": msg.content})
        else:
            logger.warning(f"Skipping unsupported message type: {type(msg).__name__}")
    return converted


def tool_choice_to_openai(tool_choice: Optional[str]) -> Any:
    if tool_choice is None:
        return None
    if tool_choice in _PLAIN_TOOL_CHOICES:
        return tool_choice
    return {"type": "function", "function": {"name": tool_choice}}


def chunk_to_deltas(chunk: ChatCompletionChunk) -> Iterable[StreamDelta]:
    """Map one streamed chunk to provider-neutral deltas."""
    if chunk.choices:
        delta = chunk.choices[0].delta
        if delta.content:
            yield TextDelta(content=delta.content)
        # OpenAI-compatible servers may stream reasoning as an extra field
        reasoning = getattr(delta, "reasoning_content", None)
        if isinstance(reasoning, str) and reasoning:
            yield ReasoningDelta(content=reasoning)
        for tool_call in delta.tool_calls or []:
            function = tool_call.function
            yield ToolCallDelta(
                index=tool_call.index,
                id=tool_call.id,
                name=function.name if function else None,
                arguments=function.arguments if function else None,
            )

    if chunk.usage:
        yield _usage_delta(chunk.usage)


def completion_to_deltas(response: ChatCompletion) -> Iterable[StreamDelta]:
    """Map a complete (non-streamed) response to the same deltas a stream would produce."""
    if response.choices:
        message = response.choices[0].message
        if message.content:
            yield TextDelta(content=message.content)
        for index, tool_call in enumerate(message.tool_calls or []):
            if tool_call.type != "function":
                logger.warning(f"Ignoring unsupported tool call type: {tool_call.type}")
                continue
            yield ToolCallDelta(
                index=index,
                id=tool_call.id,
                name=tool_call.function.name,
                arguments=tool_call.function.arguments,
            )

    if response.usage:
        yield _usage_delta(response.usage)


def _usage_delta(usage: Any) -> UsageDelta:
    details = getattr(usage, "completion_tokens_details", None)
    reasoning = getattr(details, "reasoning_tokens", None) if details is not None else None
    return UsageDelta(
        input_tokens=usage.prompt_tokens,
        output_tokens=usage.completion_tokens,
        reasoning_tokens=reasoning if isinstance(reasoning, int) else None,
    )
