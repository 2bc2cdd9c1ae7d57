"""Reassembles streamed provider deltas into a complete assistant message."""

import json
import time
from typing import (
    AsyncIterable,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Union,
)

from ..cancellation import CancellationSignal
from ..exceptions import GenerationAbortError, is_abort_error
from ..logger import get_logger
from ..messages import (
    AssistantMessage,
    AssistantResponseEvent,
    AssistantWithToolsMessage,
    AssistantWithToolsResponseEvent,
    ChunkEvent,
    GenerationError,
    MessageMeta,
    ReasoningChunkEvent,
    StopReason,
    StreamEvent,
    generate_assistant_message,
    generate_unique_id,
)
from ..serialization import deserialize
from ..tools.models import (
    ApprovalState,
    ExecutionState,
    ToolCall,
    ToolCallError,
    ToolCallFunction,
    ToolCallRequest,
)
from ..tools.registry import ToolRegistry
from .deltas import ReasoningDelta, StreamDelta, TextDelta, ToolCallDelta, UsageDelta

logger = get_logger(__name__)

DeltaSource = Union[AsyncIterable[StreamDelta], Callable[[], Awaitable[AsyncIterable[StreamDelta]]]]

ARGUMENT_PARSE_ERROR = "ToolArgumentParseError"


class _ToolCallSlot:
    __slots__ = ("id", "name", "arguments")

    def __init__(self) -> None:
        self.id = ""
        self.name = ""
        self.arguments = ""


class StreamAssembler:
    """
    Turns a stream of provider deltas into stream events and a final message.

    Text and reasoning deltas are re-emitted as they arrive. Tool-call fragments are
    collected per provider index and only become tool calls once the stream ends, in
    ascending index order. A terminal ``response`` event is always emitted once the
    first delta has arrived, also when the stream fails or is cancelled.
    """

    def __init__(
        self,
        *,
        model: str,
        provider: str,
        temperature: Optional[float] = None,
        registry: Optional[ToolRegistry] = None,
        cancellation: Optional[CancellationSignal] = None,
    ) -> None:
        """
        Args:
            model: Model name recorded in the message meta.
            provider: Provider name recorded in the message meta.
            temperature: Sampling temperature recorded in the message meta.
            registry: Used to decide which tool calls need approval.
            cancellation: Signal checked before the stream opens and on every delta.
        """
        self.model = model
        self.provider = provider
        self.temperature = temperature
        self.registry = registry
        self.cancellation = cancellation

        self.content = ""
        self.reasoning_content = ""
        self.input_tokens: Optional[int] = None
        self.output_tokens: Optional[int] = None
        self.reasoning_tokens: Optional[int] = None
        self.message: Optional[Union[AssistantMessage, AssistantWithToolsMessage]] = None

        self._slots: Dict[int, _ToolCallSlot] = {}
        self._cancel_seen = False

    async def stream(self, source: DeltaSource) -> AsyncIterator[StreamEvent]:
        """Consume ``source`` and yield stream events, ending with one ``response`` event.

        Args:
            source: An async iterable of deltas, or an async factory opening one. With a
                factory the cancellation signal is checked before the stream is opened.

        Raises:
            GenerationAbortError: If cancelled before the first delta arrived.
            Exception: Any transport failure raised before the first delta arrived.
        """
        signal = self.cancellation
        if signal is not None:
            signal.raise_if_cancelled()
            signal.add_listener(self._on_cancel)

        start = time.monotonic()
        received = False
        failure: Optional[Exception] = None
        deltas: Optional[AsyncIterable[StreamDelta]] = None
        try:
            deltas = await source() if callable(source) else source
            async for delta in deltas:
                received = True
                if self._is_cancelled():
                    break
                event = self._apply(delta)
                if event is not None:
                    yield event
        except Exception as exc:
            if not received:
                if self._is_cancelled() or is_abort_error(exc):
                    logger.info("Stream cancelled before the first delta.")
                    raise GenerationAbortError("Request was aborted") from exc
                logger.error(f"Stream failed before the first delta: {exc}")
                raise
            failure = exc
        finally:
            if signal is not None:
                signal.remove_listener(self._on_cancel)
            # Leaving the loop early must still release the provider stream
            aclose = getattr(deltas, "aclose", None)
            if aclose is not None:
                await aclose()

        if not received and self._is_cancelled():
            raise GenerationAbortError("Request was aborted")

        stop_reason = self._stop_reason(failure)
        error = None
        if stop_reason == "generationError" and failure is not None:
            logger.error(f"Stream error from {self.provider}: {failure}")
            error = GenerationError(message=str(failure), type=type(failure).__name__)

        meta = MessageMeta(
            model=self.model,
            provider=self.provider,
            temperature=self.temperature,
            duration_ms=int((time.monotonic() - start) * 1000),
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            reasoning_tokens=self.reasoning_tokens,
        )
        message = generate_assistant_message(
            self.content,
            reasoning_content=self.reasoning_content or None,
            tool_calls=self._finalize_tool_calls(),
            meta=meta,
        )
        self.message = message
        logger.debug(f"Stream finished with stop reason '{stop_reason}'.")
        yield self._response_event(message, stop_reason, error)

    async def collect(self, source: DeltaSource) -> Union[AssistantMessage, AssistantWithToolsMessage]:
        """Drain :meth:`stream` and return the assembled message."""
        async for _ in self.stream(source):
            pass
        if self.message is None:
            msg = "Stream ended without producing a message."
            logger.error(msg)
            raise RuntimeError(msg)
        return self.message

    def _on_cancel(self, reason: str) -> None:
        self._cancel_seen = True

    def _is_cancelled(self) -> bool:
        return self._cancel_seen or (self.cancellation is not None and self.cancellation.cancelled)

    def _stop_reason(self, failure: Optional[Exception]) -> StopReason:
        if self._is_cancelled() or (failure is not None and is_abort_error(failure)):
            return "userCancelled"
        if failure is not None:
            return "generationError"
        return "completed"

    def _apply(self, delta: StreamDelta) -> Optional[StreamEvent]:
        if isinstance(delta, TextDelta):
            if not delta.content:
                return None
            self.content += delta.content
            return ChunkEvent(content=delta.content, chunk_id=generate_unique_id())

        if isinstance(delta, ReasoningDelta):
            if not delta.content:
                return None
            self.reasoning_content += delta.content
            return ReasoningChunkEvent(content=delta.content, chunk_id=generate_unique_id())

        if isinstance(delta, ToolCallDelta):
            slot = self._slots.setdefault(delta.index, _ToolCallSlot())
            slot.id += delta.id or ""
            slot.name += delta.name or ""
            slot.arguments += delta.arguments or ""
            return None

        if isinstance(delta, UsageDelta):
            self.input_tokens = _add(self.input_tokens, delta.input_tokens)
            self.output_tokens = _add(self.output_tokens, delta.output_tokens)
            self.reasoning_tokens = _add(self.reasoning_tokens, delta.reasoning_tokens)
            return None

        logger.warning(f"Ignoring unknown stream delta: {type(delta).__name__}")
        return None

    def _finalize_tool_calls(self) -> List[ToolCall]:
        return [self._to_tool_call(self._slots[index]) for index in sorted(self._slots)]

    def _to_tool_call(self, slot: _ToolCallSlot) -> ToolCall:
        request_id = slot.id or generate_unique_id()
        try:
            arguments = deserialize(slot.arguments) if slot.arguments.strip() else {}
        except json.JSONDecodeError as exc:
            logger.warning(f"Could not parse arguments for tool call '{slot.name}': {exc}")
            return ToolCall(
                id=generate_unique_id(),
                execution_state=ExecutionState.ERROR,
                request=ToolCallRequest(
                    id=request_id,
                    function=ToolCallFunction(name=slot.name, arguments={}),
                    metadata={"raw_arguments": slot.arguments},
                ),
                error=ToolCallError(
                    type=ARGUMENT_PARSE_ERROR,
                    message=f"Unable to parse tool call arguments: {exc}",
                    number_of_attempts=1,
                ),
            )

        definition = self.registry.get(slot.name) if self.registry is not None else None
        approval = (
            ApprovalState.REQUIRES_APPROVAL
            if definition is not None and definition.requires_confirmation
            else ApprovalState.NO_APPROVAL_REQUIRED
        )
        return ToolCall(
            id=generate_unique_id(),
            approval_state=approval,
            request=ToolCallRequest(
                id=request_id,
                function=ToolCallFunction(name=slot.name, arguments=arguments),
            ),
        )

    def _response_event(
        self,
        message: Union[AssistantMessage, AssistantWithToolsMessage],
        stop_reason: StopReason,
        error: Optional[GenerationError],
    ) -> StreamEvent:
        if isinstance(message, AssistantWithToolsMessage):
            return AssistantWithToolsResponseEvent(
                message_id=message.id,
                content=message.content,
                reasoning_content=message.reasoning_content,
                tool_calls=message.tool_calls,
                meta=message.meta,
                stop_reason=stop_reason,
                error=error,
            )
        return AssistantResponseEvent(
            message_id=message.id,
            content=message.content,
            reasoning_content=message.reasoning_content,
            meta=message.meta,
            stop_reason=stop_reason,
            error=error,
        )


def _add(total: Optional[int], value: Optional[int]) -> Optional[int]:
    if value is None:
        return total
    return (total or 0) + value
