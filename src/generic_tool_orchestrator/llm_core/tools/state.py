"""Approval and execution state transitions over lists of tool calls.

All functions are pure: they return new lists and never touch their input.
"""

from typing import List, Optional, Sequence, Union

from .models import (
    OPEN_EXECUTION_STATES,
    ApprovalState,
    ExecutionState,
    ToolCall,
    ToolCallClassification,
)

ToolCallIds = Optional[Union[str, Sequence[str]]]

CANCELLATION_ERROR_TYPE = "ToolCancellation"
CANCELLATION_MESSAGE = "Tool call was cancelled"


def _normalize_ids(tool_call_ids: ToolCallIds) -> Optional[List[str]]:
    # None or empty targets every call
    if not tool_call_ids:
        return None
    if isinstance(tool_call_ids, str):
        return [tool_call_ids]
    return list(tool_call_ids)


def _targeted(call: ToolCall, target_ids: Optional[List[str]]) -> bool:
    return target_ids is None or call.id in target_ids


def extract_requiring_approval(tool_calls: Sequence[ToolCall]) -> List[ToolCall]:
    return [call for call in tool_calls if call.approval_state == ApprovalState.REQUIRES_APPROVAL]


def extract_pending(tool_calls: Sequence[ToolCall]) -> List[ToolCall]:
    return [call for call in tool_calls if call.execution_state == ExecutionState.PENDING]


def extract_completed(tool_calls: Sequence[ToolCall]) -> List[ToolCall]:
    return [call for call in tool_calls if call.execution_state == ExecutionState.COMPLETED]


def extract_errored(tool_calls: Sequence[ToolCall]) -> List[ToolCall]:
    return [call for call in tool_calls if call.execution_state == ExecutionState.ERROR]


def has_requiring_approval(tool_calls: Sequence[ToolCall]) -> bool:
    return any(call.approval_state == ApprovalState.REQUIRES_APPROVAL for call in tool_calls)


def has_pending(tool_calls: Sequence[ToolCall]) -> bool:
    """True if any call is pending or in progress."""
    return any(call.execution_state in OPEN_EXECUTION_STATES for call in tool_calls)


def classify(tool_calls: Sequence[ToolCall]) -> ToolCallClassification:
    """Classify tool calls without looking at the registry.

    Use :meth:`ToolRegistry.classify_tool_calls` to also detect missing executors and transfers.
    """
    if has_requiring_approval(tool_calls):
        return ToolCallClassification.APPROVAL_PENDING
    if has_pending(tool_calls):
        return ToolCallClassification.EXECUTION_PENDING
    return ToolCallClassification.COMPLETED


def _set_approval(tool_calls: Sequence[ToolCall], state: ApprovalState, tool_call_ids: ToolCallIds) -> List[ToolCall]:
    target_ids = _normalize_ids(tool_call_ids)
    return [
        call.evolve(approval_state=state)
        if call.approval_state == ApprovalState.REQUIRES_APPROVAL and _targeted(call, target_ids)
        else call
        for call in tool_calls
    ]


def approve(tool_calls: Sequence[ToolCall], tool_call_ids: ToolCallIds = None) -> List[ToolCall]:
    """Approve calls awaiting approval. Other calls are returned as they are."""
    return _set_approval(tool_calls, ApprovalState.APPROVED, tool_call_ids)


def reject(tool_calls: Sequence[ToolCall], tool_call_ids: ToolCallIds = None) -> List[ToolCall]:
    """Reject calls awaiting approval.

    A rejected call stays pending; the call processor resolves it as completed with a
    rejection result so the model gets feedback.
    """
    return _set_approval(tool_calls, ApprovalState.REJECTED, tool_call_ids)


def cancel(tool_calls: Sequence[ToolCall], tool_call_ids: ToolCallIds = None) -> List[ToolCall]:
    """Cancel pending or in-progress calls."""
    target_ids = _normalize_ids(tool_call_ids)
    return [
        call.failed(
            CANCELLATION_ERROR_TYPE,
            CANCELLATION_MESSAGE,
            state=ExecutionState.CANCELLED,
            number_of_attempts=0,
        )
        if call.is_open and _targeted(call, target_ids)
        else call
        for call in tool_calls
    ]
