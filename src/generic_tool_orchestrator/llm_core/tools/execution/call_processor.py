"""Budgeted, sequential execution of the tool calls carried by a message."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from ...cancellation import CancellationSignal
from ...exceptions import ToolExecutionError, TransferPendingError
from ...logger import get_logger, mask_all
from ...messages import ToolCallCompletedEvent, ToolCallStartedEvent
from ..models import (
    ApprovalState,
    ExecutionState,
    FunctionKind,
    ToolCall,
    ToolCallClassification,
    ToolDefinition,
)
from ..registry import ToolRegistry

logger = get_logger(__name__)

REJECTION_RESULT = {"error": "Tool call was rejected by user"}
EXECUTION_ERROR_TYPE = ToolExecutionError.__name__

ToolCallEvent = Union[ToolCallStartedEvent, ToolCallCompletedEvent]
EventCallback = Callable[[ToolCallEvent], Union[None, Awaitable[None]]]

MessageT = TypeVar("MessageT", bound=BaseModel)


class ProcessCallsConfig(BaseModel):
    """
    Settings for one :meth:`ToolCallProcessor.process_calls` run.

    Attributes:
        retry_failed: Execute calls in ``error`` state again.
        context: Data handed to executors. May appear in logs.
        secure_context: Data handed to executors. Never logged.
        max_errors: Once this many executions failed, remaining calls are cancelled.
        max_calls: Once this many calls were processed, remaining calls are cancelled.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    retry_failed: bool = False
    context: Optional[Dict[str, Any]] = None
    secure_context: Optional[Dict[str, Any]] = None
    max_errors: int = Field(default=5, ge=0)
    max_calls: int = Field(default=8, ge=0)


class ProcessedToolCall(NamedTuple):
    """Outcome of :meth:`ToolCallProcessor.process_tool_call`.

    ``handled`` is False when the call still needs approval, delegation or is in flight.
    """

    tool_call: ToolCall
    handled: bool


class NextToolCall(NamedTuple):
    tool_call: ToolCall
    tool: ToolDefinition


class ToolCallProcessor:
    """
    Drives tool calls from pending to a terminal state.

    Calls are executed strictly one after another, in message order. Tool failures
    are recorded on the tool call instead of being raised, so a failing call never
    blocks the other calls of the same turn.
    """

    def __init__(self, registry: ToolRegistry, tool_timeout: float = 180.0) -> None:
        """
        Args:
            registry: Registry used to resolve tools by name.
            tool_timeout: Maximum time in seconds a single executor may run.
        """
        self.registry = registry
        self.tool_timeout = tool_timeout

    async def process_calls(
        self,
        message: MessageT,
        *,
        retry_failed: bool = False,
        context: Optional[Dict[str, Any]] = None,
        secure_context: Optional[Dict[str, Any]] = None,
        max_errors: int = 5,
        max_calls: int = 8,
        cancellation: Optional[CancellationSignal] = None,
        on_event: Optional[EventCallback] = None,
    ) -> MessageT:
        """
        Process the tool calls of a message and return an updated copy.

        Args:
            message: Any message model with a ``tool_calls`` attribute. Messages without
                tool calls are returned unchanged.
            retry_failed: Execute calls in ``error`` state again.
            context: Data handed to executors.
            secure_context: Data handed to executors, masked in logs.
            max_errors: Failed executions tolerated before remaining calls are cancelled.
            max_calls: Calls processed before remaining calls are cancelled.
            cancellation: When active, remaining calls are cancelled.
            on_event: Receives toolCallStarted/toolCallCompleted events around executions.

        Returns:
            A copy of the message with updated tool calls. The input is not modified.

        Raises:
            TransferPendingError: If transfer or sub-task calls are awaiting delegation.
            ToolNotFoundError: If a call names a tool that is not registered.
        """
        tool_calls: Optional[List[ToolCall]] = getattr(message, "tool_calls", None)
        if not tool_calls:
            return message

        config = ProcessCallsConfig(
            retry_failed=retry_failed,
            context=context,
            secure_context=secure_context,
            max_errors=max_errors,
            max_calls=max_calls,
        )

        classification = self.registry.classify_tool_calls(tool_calls)
        if classification == ToolCallClassification.TRANSFER_PENDING:
            msg = "Transfer tools cannot be processed by the call processor."
            logger.error(msg)
            raise TransferPendingError(msg)

        logger.info(
            f"Processing {len(tool_calls)} tool call(s) ({classification.value}); "
            f"context={config.context}, secure_context={mask_all(config.secure_context)}"
        )

        errors = 0
        calls = 0
        processed: List[ToolCall] = []
        for call in tool_calls:
            if call.execution_state == ExecutionState.COMPLETED or (
                call.execution_state == ExecutionState.ERROR and not config.retry_failed
            ):
                processed.append(call)
            elif call.execution_state == ExecutionState.CANCELLED:
                processed.append(call)
            elif cancellation is not None and cancellation.cancelled:
                processed.append(self._cancel(call, "Request was aborted"))
            elif errors >= config.max_errors:
                processed.append(self._cancel(call, "Too many tool call errors"))
            elif calls >= config.max_calls:
                processed.append(self._cancel(call, "Too many tool calls"))
            elif classification == ToolCallClassification.MISSING_EXECUTOR:
                processed.append(self._cancel(call, "Unable to execute tool"))
            else:
                result = await self._process_with_events(call, config, on_event)
                processed.append(result.tool_call)
                if result.tool_call.error is not None:
                    errors += 1
                calls += 1

        return message.model_copy(update={"tool_calls": processed})

    async def process_tool_call(
        self,
        tool_call: ToolCall,
        *,
        retry_failed: bool = False,
        context: Optional[Dict[str, Any]] = None,
        secure_context: Optional[Dict[str, Any]] = None,
    ) -> ProcessedToolCall:
        """
        Process a single tool call.

        Returns:
            The updated tool call and whether it was handled. Unhandled calls need
            approval, delegation, or are already in progress elsewhere.
        """
        if tool_call.approval_state == ApprovalState.REQUIRES_APPROVAL:
            return ProcessedToolCall(tool_call, False)

        state = tool_call.execution_state
        if state == ExecutionState.COMPLETED:
            return ProcessedToolCall(tool_call, True)
        if state == ExecutionState.ERROR and not retry_failed:
            return ProcessedToolCall(tool_call, True)
        if state == ExecutionState.IN_PROGRESS:
            return ProcessedToolCall(tool_call, False)

        if tool_call.approval_state == ApprovalState.REJECTED:
            logger.info(f"Tool call '{tool_call.id}' ({tool_call.name}) was rejected.")
            return ProcessedToolCall(tool_call.completed(dict(REJECTION_RESULT)), True)

        tool = self.registry.get(tool_call.name)
        if tool is None:
            msg = f"Tool not found: {tool_call.name}"
            logger.warning(msg)
            return ProcessedToolCall(tool_call.failed("ToolNotFoundError", msg), True)

        if not isinstance(tool.kind, FunctionKind):
            return ProcessedToolCall(tool_call, False)

        logger.debug(f"Executing tool '{tool.name}' for call '{tool_call.id}'.")
        try:
            result = await asyncio.wait_for(
                tool.execute(tool_call.arguments, context, secure_context),
                timeout=self.tool_timeout,
            )
        except asyncio.TimeoutError:
            msg = f"Tool '{tool.name}' timed out after {self.tool_timeout} seconds."
            logger.error(msg)
            return ProcessedToolCall(tool_call.failed(EXECUTION_ERROR_TYPE, msg), True)
        except Exception as exc:
            logger.warning(f"Tool '{tool.name}' failed: {type(exc).__name__}: {exc}")
            message = str(exc) or f"Unable to execute tool: {tool.name}"
            return ProcessedToolCall(tool_call.failed(type(exc).__name__, message), True)

        # None would break the result invariant of a completed call
        return ProcessedToolCall(tool_call.completed({} if result is None else result), True)

    def get_next_tool_call(self, tool_calls: Sequence[ToolCall]) -> Optional[NextToolCall]:
        """
        Return the first pending or in-progress call together with its tool.

        Raises:
            ToolNotFoundError: If that call names an unregistered tool.
        """
        for call in tool_calls:
            if call.is_open:
                return NextToolCall(call, self.registry.require(call.name))
        return None

    async def _process_with_events(
        self, call: ToolCall, config: ProcessCallsConfig, on_event: Optional[EventCallback]
    ) -> ProcessedToolCall:
        executes = on_event is not None and self._will_execute(call, config)
        if executes:
            await _emit(on_event, ToolCallStartedEvent(tool_call=call))

        result = await self.process_tool_call(
            call,
            retry_failed=config.retry_failed,
            context=config.context,
            secure_context=config.secure_context,
        )

        if executes:
            await _emit(on_event, ToolCallCompletedEvent(tool_call=result.tool_call))
        return result

    def _will_execute(self, call: ToolCall, config: ProcessCallsConfig) -> bool:
        if call.approval_state in (ApprovalState.REQUIRES_APPROVAL, ApprovalState.REJECTED):
            return False
        if call.execution_state == ExecutionState.ERROR and not config.retry_failed:
            return False
        if call.execution_state not in (ExecutionState.PENDING, ExecutionState.ERROR):
            return False
        tool = self.registry.get(call.name)
        return tool is not None and isinstance(tool.kind, FunctionKind)

    @staticmethod
    def _cancel(call: ToolCall, reason: str) -> ToolCall:
        logger.warning(f"Cancelling tool call '{call.id}' ({call.name}): {reason}")
        return call.failed(EXECUTION_ERROR_TYPE, reason, state=ExecutionState.CANCELLED)


async def _emit(on_event: Optional[EventCallback], event: ToolCallEvent) -> None:
    if on_event is None:
        return
    outcome = on_event(event)
    if inspect.isawaitable(outcome):
        await outcome
