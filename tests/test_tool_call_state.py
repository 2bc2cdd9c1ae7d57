import pytest
from pydantic import ValidationError

from generic_tool_orchestrator.llm_core.tools import state
from generic_tool_orchestrator.llm_core.tools.models import (
    ApprovalState,
    ExecutionState,
    ToolCall,
    ToolCallClassification,
    ToolCallError,
)


def test_result_requires_completed_state(make_call) -> None:
    with pytest.raises(ValidationError, match="result"):
        make_call(result={"x": 1})


def test_completed_requires_result(make_call) -> None:
    with pytest.raises(ValidationError):
        make_call(execution_state=ExecutionState.COMPLETED)


def test_error_requires_failed_state(make_call) -> None:
    with pytest.raises(ValidationError, match="error"):
        make_call(error=ToolCallError(type="X", message="boom"))

    with pytest.raises(ValidationError):
        make_call(execution_state=ExecutionState.CANCELLED)


def test_call_awaiting_approval_cannot_start(make_call) -> None:
    with pytest.raises(ValidationError, match="approval"):
        make_call(approval_state=ApprovalState.REQUIRES_APPROVAL, execution_state=ExecutionState.IN_PROGRESS)


def test_completed_and_failed_helpers_keep_invariants(make_call) -> None:
    call = make_call()

    done = call.completed({"temperature": 22})
    assert done.execution_state == ExecutionState.COMPLETED
    assert done.result == {"temperature": 22}
    assert done.error is None

    failed = call.failed("Exception", "timeout")
    assert failed.execution_state == ExecutionState.ERROR
    assert failed.result is None
    assert failed.error.number_of_attempts == 1
    assert failed.failed("Exception", "again").error.number_of_attempts == 2

    # Original is left untouched
    assert call.execution_state == ExecutionState.PENDING


def test_tool_call_dumps_with_camel_case_aliases(make_call) -> None:
    dumped = make_call().failed("Exception", "boom").model_dump(by_alias=True, mode="json")
    assert dumped["approvalState"] == "noApprovalRequired"
    assert dumped["executionState"] == "error"
    assert dumped["error"]["numberOfAttempts"] == 1
    assert "lastAttempt" in dumped["error"]

    restored = ToolCall.model_validate(dumped)
    assert restored.error.message == "boom"


def test_classify_empty_list_is_completed() -> None:
    assert state.classify([]) == ToolCallClassification.COMPLETED


def test_classify_priority(make_call) -> None:
    pending = make_call(call_id="a")
    needs_approval = make_call(call_id="b", approval_state=ApprovalState.REQUIRES_APPROVAL)
    done = make_call(call_id="c").completed({"ok": True})

    assert state.classify([pending, needs_approval]) == ToolCallClassification.APPROVAL_PENDING
    assert state.classify([pending, done]) == ToolCallClassification.EXECUTION_PENDING
    assert state.classify([done]) == ToolCallClassification.COMPLETED


def test_approve_is_idempotent(make_call) -> None:
    calls = [make_call(approval_state=ApprovalState.REQUIRES_APPROVAL)]

    once = state.approve(calls)
    twice = state.approve(once)

    assert once[0].approval_state == ApprovalState.APPROVED
    assert twice[0].approval_state == ApprovalState.APPROVED
    assert calls[0].approval_state == ApprovalState.REQUIRES_APPROVAL


def test_reject_does_not_touch_approved_calls(make_call) -> None:
    calls = state.approve([make_call(approval_state=ApprovalState.REQUIRES_APPROVAL)])
    assert state.reject(calls)[0].approval_state == ApprovalState.APPROVED


def test_approve_targets_ids(make_call) -> None:
    calls = [
        make_call(call_id="a", approval_state=ApprovalState.REQUIRES_APPROVAL),
        make_call(call_id="b", approval_state=ApprovalState.REQUIRES_APPROVAL),
    ]

    by_str = state.approve(calls, "a")
    by_list = state.reject(calls, ["b"])
    all_calls = state.approve(calls, [])

    assert [c.approval_state for c in by_str] == [ApprovalState.APPROVED, ApprovalState.REQUIRES_APPROVAL]
    assert [c.approval_state for c in by_list] == [ApprovalState.REQUIRES_APPROVAL, ApprovalState.REJECTED]
    assert all(c.approval_state == ApprovalState.APPROVED for c in all_calls)


def test_cancel_only_touches_open_calls(make_call) -> None:
    calls = [
        make_call(call_id="a"),
        make_call(call_id="b").completed({"ok": True}),
        make_call(call_id="c", approval_state=ApprovalState.REQUIRES_APPROVAL),
    ]

    cancelled = state.cancel(calls)

    assert cancelled[0].execution_state == ExecutionState.CANCELLED
    assert cancelled[0].error.type == "ToolCancellation"
    assert cancelled[0].error.message == "Tool call was cancelled"
    assert cancelled[0].error.number_of_attempts == 0
    assert cancelled[1] is calls[1]
    assert cancelled[2].execution_state == ExecutionState.CANCELLED


def test_extractors_and_predicates(make_call) -> None:
    pending = make_call(call_id="a")
    needs_approval = make_call(call_id="b", approval_state=ApprovalState.REQUIRES_APPROVAL)
    done = make_call(call_id="c").completed({"ok": True})
    errored = make_call(call_id="d").failed("Exception", "boom")
    calls = [pending, needs_approval, done, errored]

    assert state.extract_requiring_approval(calls) == [needs_approval]
    assert state.extract_pending(calls) == [pending, needs_approval]
    assert state.extract_completed(calls) == [done]
    assert state.extract_errored(calls) == [errored]
    assert state.has_requiring_approval(calls)
    assert state.has_pending(calls)
    assert not state.has_pending([done, errored])
