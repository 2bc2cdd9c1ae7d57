"""Bulk helpers for approving, rejecting, cancelling and inspecting tool calls.

The single-message helpers work on an ``assistant_with_tools`` message; the list
helpers walk a whole conversation and leave every other message untouched. All
helpers return new objects.
"""

from typing import List, NamedTuple, Optional, Sequence, TypeVar

from pydantic import BaseModel

from ..messages import AssistantWithToolsMessage
from . import state
from .models import ApprovalState, ExecutionState, ToolCall, ToolCallClassification
from .state import ToolCallIds

MessageT = TypeVar("MessageT", bound=BaseModel)


def _is_tool_message(message: BaseModel) -> bool:
    return isinstance(message, AssistantWithToolsMessage)


# Single message


def extract_tool_calls_requiring_approval(message: AssistantWithToolsMessage) -> List[ToolCall]:
    return state.extract_requiring_approval(message.tool_calls)


def extract_pending_tool_calls(message: AssistantWithToolsMessage) -> List[ToolCall]:
    return state.extract_pending(message.tool_calls)


def extract_completed_tool_calls(message: AssistantWithToolsMessage) -> List[ToolCall]:
    return state.extract_completed(message.tool_calls)


def extract_errored_tool_calls(message: AssistantWithToolsMessage) -> List[ToolCall]:
    return state.extract_errored(message.tool_calls)


def classify_message_tool_calls(message: AssistantWithToolsMessage) -> ToolCallClassification:
    return state.classify(message.tool_calls)


def has_tool_calls_requiring_approval(message: AssistantWithToolsMessage) -> bool:
    return state.has_requiring_approval(message.tool_calls)


def has_pending_tool_calls(message: AssistantWithToolsMessage) -> bool:
    return state.has_pending(message.tool_calls)


def approve_message_tool_calls(
    message: AssistantWithToolsMessage, tool_call_ids: ToolCallIds = None
) -> AssistantWithToolsMessage:
    return message.with_tool_calls(state.approve(message.tool_calls, tool_call_ids))


def reject_message_tool_calls(
    message: AssistantWithToolsMessage, tool_call_ids: ToolCallIds = None
) -> AssistantWithToolsMessage:
    return message.with_tool_calls(state.reject(message.tool_calls, tool_call_ids))


def cancel_message_tool_calls(
    message: AssistantWithToolsMessage, tool_call_ids: ToolCallIds = None
) -> AssistantWithToolsMessage:
    return message.with_tool_calls(state.cancel(message.tool_calls, tool_call_ids))


# Message lists


def extract_messages_with_approval_required(messages: Sequence[BaseModel]) -> List[AssistantWithToolsMessage]:
    return [m for m in messages if _is_tool_message(m) and has_tool_calls_requiring_approval(m)]  # type: ignore[arg-type]


def extract_messages_with_pending_tool_calls(messages: Sequence[BaseModel]) -> List[AssistantWithToolsMessage]:
    return [m for m in messages if _is_tool_message(m) and has_pending_tool_calls(m)]  # type: ignore[arg-type]


def get_latest_message_with_approval_required(
    messages: Sequence[BaseModel],
) -> Optional[AssistantWithToolsMessage]:
    matching = extract_messages_with_approval_required(messages)
    return matching[-1] if matching else None


def approve_tool_calls_in_messages(messages: Sequence[MessageT], tool_call_ids: ToolCallIds = None) -> List[MessageT]:
    return [
        approve_message_tool_calls(m, tool_call_ids) if _is_tool_message(m) else m  # type: ignore[misc]
        for m in messages
    ]


def reject_tool_calls_in_messages(messages: Sequence[MessageT], tool_call_ids: ToolCallIds = None) -> List[MessageT]:
    return [
        reject_message_tool_calls(m, tool_call_ids) if _is_tool_message(m) else m  # type: ignore[misc]
        for m in messages
    ]


def cancel_tool_calls_in_messages(messages: Sequence[MessageT], tool_call_ids: ToolCallIds = None) -> List[MessageT]:
    return [
        cancel_message_tool_calls(m, tool_call_ids) if _is_tool_message(m) else m  # type: ignore[misc]
        for m in messages
    ]


class PendingToolCall(NamedTuple):
    message_id: str
    tool_call: ToolCall


def extract_pending_tool_calls_from_messages(messages: Sequence[BaseModel]) -> List[PendingToolCall]:
    """Every pending call in the conversation, paired with the id of its message."""
    return [
        PendingToolCall(message.id, call)
        for message in extract_messages_with_pending_tool_calls(messages)
        for call in state.extract_pending(message.tool_calls)
    ]


def get_number_of_pending_tool_calls(messages: Sequence[BaseModel]) -> int:
    return len(extract_pending_tool_calls_from_messages(messages))


class ToolCallSummary(BaseModel):
    """Counts of approval and execution states across a conversation."""

    total_tool_calls: int = 0
    requires_approval: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
    errored: int = 0


_APPROVAL_COUNTERS = {
    ApprovalState.REQUIRES_APPROVAL: "requires_approval",
    ApprovalState.APPROVED: "approved",
    ApprovalState.REJECTED: "rejected",
}

_EXECUTION_COUNTERS = {
    ExecutionState.PENDING: "pending",
    ExecutionState.IN_PROGRESS: "in_progress",
    ExecutionState.COMPLETED: "completed",
    ExecutionState.CANCELLED: "cancelled",
    ExecutionState.ERROR: "errored",
}


def get_tool_call_summary(messages: Sequence[BaseModel]) -> ToolCallSummary:
    counts = dict.fromkeys(ToolCallSummary.model_fields, 0)
    for message in messages:
        if not isinstance(message, AssistantWithToolsMessage):
            continue
        for call in message.tool_calls:
            counts["total_tool_calls"] += 1
            approval_key = _APPROVAL_COUNTERS.get(call.approval_state)
            if approval_key:
                counts[approval_key] += 1
            counts[_EXECUTION_COUNTERS[call.execution_state]] += 1
    return ToolCallSummary(**counts)
