from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence, Union, cast

from openai import AsyncOpenAI

from generic_tool_orchestrator.llm_core.base import GenerationConfig, LLMProvider
from generic_tool_orchestrator.llm_core.cancellation import CancellationSignal
from generic_tool_orchestrator.llm_core.logger import get_logger
from generic_tool_orchestrator.llm_core.messages import (
    AssistantMessage,
    AssistantWithToolsMessage,
    Message,
    StreamEvent,
)
from generic_tool_orchestrator.llm_core.streaming import StreamAssembler, StreamDelta
from .adapter import chunk_to_deltas, completion_to_deltas, convert_messages, tool_choice_to_openai

logger = get_logger(__name__)


class OpenAIProvider(LLMProvider):
    """
    Provider backed by the OpenAI chat completions API, or any service speaking it.

    Tool calls come back ``pending``; executing them is up to the call processor.
    """

    default_name = "openai"

    def __init__(self, client: AsyncOpenAI, name: Optional[str] = None) -> None:
        """
        Args:
            client: The initialized AsyncOpenAI client (reads ``OPENAI_API_KEY`` when built without a key).
            name: Provider name recorded in message meta. Defaults to ``openai``.
        """
        self.client: AsyncOpenAI = client
        self._name = name or self.default_name

    @property
    def name(self) -> str:
        return self._name

    async def generate_response(
        self,
        model: str,
        messages: Sequence[Message],
        config: Optional[GenerationConfig] = None,
    ) -> Union[AssistantMessage, AssistantWithToolsMessage]:
        """
        Generate a complete assistant message in one request.

        Raises:
            GenerationAbortError: If the cancellation signal is already active.
        """
        config = config or GenerationConfig()
        assembler = self._assembler(model, config)

        async def open_response() -> AsyncIterator[StreamDelta]:
            response = await self.client.chat.completions.create(**self._request_args(model, messages, config))
            return _iterate(completion_to_deltas(response))

        return await assembler.collect(open_response)

    async def generate_response_stream(
        self,
        model: str,
        messages: Sequence[Message],
        config: Optional[GenerationConfig] = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream events for one assistant message; the last event is always a ``response``.

        Raises:
            GenerationAbortError: If cancelled before the first chunk arrived.
        """
        config = config or GenerationConfig()
        assembler = self._assembler(model, config)

        async def open_stream() -> AsyncIterator[StreamDelta]:
            stream = await self.client.chat.completions.create(
                **self._request_args(model, messages, config),
                stream=True,
                stream_options={"include_usage": True},
            )
            return _stream_deltas(stream)

        async for event in assembler.stream(open_stream):
            yield event

    async def list_available_models(self) -> List[str]:
        page = await self.client.models.list()
        return [model.id for model in page.data]

    async def create_embedding(
        self,
        model: str,
        text: str,
        cancellation: Optional[CancellationSignal] = None,
    ) -> List[float]:
        """
        Embed a single text.

        Raises:
            GenerationAbortError: If the cancellation signal is already active.
            ValueError: If the response carries no embedding.
        """
        if cancellation is not None:
            cancellation.raise_if_cancelled()

        response = await self.client.embeddings.create(model=model, input=text)
        if not response or not response.data:
            msg = "Failed to create embedding"
            logger.error(msg)
            raise ValueError(msg)
        return list(response.data[0].embedding)

    def _assembler(self, model: str, config: GenerationConfig) -> StreamAssembler:
        return StreamAssembler(
            model=model,
            provider=self.name,
            temperature=config.temperature,
            registry=config.tools,
            cancellation=config.cancellation,
        )

    @staticmethod
    def _request_args(model: str, messages: Sequence[Message], config: GenerationConfig) -> Dict[str, Any]:
        args: Dict[str, Any] = {
            "model": model,
            # the SDK expects a union of TypedDicts; plain dicts are structurally compatible
            "messages": cast(Iterable[Any], convert_messages(messages)),
        }
        if config.temperature is not None:
            args["temperature"] = config.temperature
        if config.max_tokens is not None:
            args["max_tokens"] = config.max_tokens
        if config.json_mode:
            args["response_format"] = {"type": "json_object"}

        registry = config.tools
        if registry is not None and registry.has_tools:
            args["tools"] = registry.as_llm_functions
            args["parallel_tool_calls"] = registry.allow_parallel_calls
            tool_choice = tool_choice_to_openai(config.tool_choice)
            if tool_choice is not None:
                args["tool_choice"] = tool_choice
        return args


async def _iterate(deltas: Iterable[StreamDelta]) -> AsyncIterator[StreamDelta]:
    for delta in deltas:
        yield delta


async def _stream_deltas(stream: Any) -> AsyncIterator[StreamDelta]:
    try:
        async for chunk in stream:
            for delta in chunk_to_deltas(chunk):
                yield delta
    finally:
        # AsyncStream holds the HTTP response open until closed
        close = getattr(stream, "close", None)
        if close is not None:
            await close()
