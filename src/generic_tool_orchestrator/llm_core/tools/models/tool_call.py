"""Tool-call data models and their lifecycle states.

A tool call moves along two independent axes: approval (whether a human or
policy gate must clear it) and execution (where it sits in its
run-to-completion lifecycle). The models here are immutable values; every
state change produces a new instance via :meth:`ToolCall.evolve`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ApprovalState(str, Enum):
    """Whether a gate must clear the tool call before execution."""

    NO_APPROVAL_REQUIRED = "noApprovalRequired"
    REQUIRES_APPROVAL = "requiresApproval"
    APPROVED = "approved"
    REJECTED = "rejected"


class ExecutionState(str, Enum):
    """Run-to-completion lifecycle of a tool call."""

    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    ERROR = "error"
    CANCELLED = "cancelled"


class ToolCallClassification(str, Enum):
    """Overall state of a set of tool calls, in priority order."""

    APPROVAL_PENDING = "approvalPending"
    MISSING_EXECUTOR = "missingExecutor"
    TRANSFER_PENDING = "transferPending"
    EXECUTION_PENDING = "executionPending"
    COMPLETED = "completed"


OPEN_EXECUTION_STATES = frozenset({ExecutionState.PENDING, ExecutionState.IN_PROGRESS})
FAILED_EXECUTION_STATES = frozenset({ExecutionState.ERROR, ExecutionState.CANCELLED})


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        arbitrary_types_allowed=True,
    )


class ToolCallFunction(_CamelModel):
    """The function part of a tool-call request.

    Attributes:
        name: Name of the registered tool the model asked for.
        arguments: Decoded arguments object.
    """

    name: str
    arguments: Any = Field(default_factory=dict)


class ToolCallRequest(_CamelModel):
    """A model-requested invocation, as produced by the provider.

    Attributes:
        id: Provider-assigned call id, echoed back when returning results.
        function: Tool name and decoded arguments.
        metadata: Optional provider-specific data.
    """

    id: str
    function: ToolCallFunction
    metadata: Optional[Dict[str, Any]] = None


class ToolCallError(_CamelModel):
    """Structured failure attached to errored or cancelled tool calls."""

    type: str
    message: str
    number_of_attempts: int = Field(default=1, ge=0)
    last_attempt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ToolCall(_CamelModel):
    """A tool call with its approval and execution state.

    Invariants (checked on every construction):
        * ``result`` is set if and only if ``execution_state`` is completed.
        * ``error`` is set if and only if ``execution_state`` is error or cancelled.
        * execution cannot leave pending while approval is still required.
    """

    id: str
    approval_state: ApprovalState = ApprovalState.NO_APPROVAL_REQUIRED
    execution_state: ExecutionState = ExecutionState.PENDING
    request: ToolCallRequest
    result: Optional[Any] = None
    error: Optional[ToolCallError] = None

    @model_validator(mode="after")
    def _check_state_invariants(self) -> "ToolCall":
        completed = self.execution_state == ExecutionState.COMPLETED
        if completed != (self.result is not None):
            raise ValueError("A tool call carries a result if and only if it is completed.")

        failed = self.execution_state in FAILED_EXECUTION_STATES
        if failed != (self.error is not None):
            raise ValueError("A tool call carries an error if and only if it errored or was cancelled.")

        if (
            self.approval_state == ApprovalState.REQUIRES_APPROVAL
            and self.execution_state not in (ExecutionState.PENDING, ExecutionState.CANCELLED)
        ):
            raise ValueError("A tool call awaiting approval cannot start executing.")
        return self

    @property
    def name(self) -> str:
        return self.request.function.name

    @property
    def arguments(self) -> Any:
        return self.request.function.arguments

    @property
    def is_open(self) -> bool:
        """True while the call is pending or in progress."""
        return self.execution_state in OPEN_EXECUTION_STATES

    @property
    def attempts(self) -> int:
        return self.error.number_of_attempts if self.error else 0

    def evolve(self, **changes: Any) -> "ToolCall":
        """Return a validated copy with the given fields replaced."""
        values = {field: getattr(self, field) for field in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)

    def completed(self, result: Any) -> "ToolCall":
        """Return a completed copy carrying ``result``."""
        return self.evolve(execution_state=ExecutionState.COMPLETED, result=result, error=None)

    def failed(
        self,
        error_type: str,
        message: str,
        *,
        state: ExecutionState = ExecutionState.ERROR,
        number_of_attempts: Optional[int] = None,
    ) -> "ToolCall":
        """Return an errored or cancelled copy.

        The attempt counter continues from any earlier failure unless given explicitly.
        """
        attempts = self.attempts + 1 if number_of_attempts is None else number_of_attempts
        return self.evolve(
            execution_state=state,
            result=None,
            error=ToolCallError(type=error_type, message=message, number_of_attempts=attempts),
        )
