"""Core abstractions for LLM provider implementations."""

from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from ..cancellation import CancellationSignal
from ..messages import AssistantMessage, AssistantWithToolsMessage, Message, StreamEvent
from ..tools.registry import ToolRegistry
from ..logger import get_logger

logger = get_logger(__name__)

ToolChoice = Union[Literal["auto", "none", "required"], str]


class GenerationConfig(BaseModel):
    """Per-request generation settings handed to a provider.

    Attributes:
        temperature: Sampling temperature; None leaves the provider default.
        max_tokens: Upper bound for generated tokens.
        json_mode: Ask the provider for a JSON object response.
        tools: Tools the model may call.
        tool_choice: ``auto``, ``none``, ``required`` or the name of one tool.
        cancellation: Signal that aborts the request cooperatively.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    json_mode: bool = False
    tools: Optional[ToolRegistry] = None
    tool_choice: Optional[ToolChoice] = None
    cancellation: Optional[CancellationSignal] = None


class LLMProvider(ABC):
    """Abstract base class for model providers.

    A provider turns a message list into an assistant message, either in one piece or as
    a stream of events ending in a single ``response`` event. Providers never execute
    tools; tool calls come back ``pending`` and are handled by the call processor.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name recorded in message meta."""

    @abstractmethod
    async def generate_response(
        self,
        model: str,
        messages: Sequence[Message],
        config: Optional[GenerationConfig] = None,
    ) -> Union[AssistantMessage, AssistantWithToolsMessage]:
        """Generate a complete assistant message."""

    @abstractmethod
    def generate_response_stream(
        self,
        model: str,
        messages: Sequence[Message],
        config: Optional[GenerationConfig] = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream events for one assistant message. The last event is always a ``response``."""

    @abstractmethod
    async def list_available_models(self) -> List[str]:
        """Names of the models the provider offers."""

    @abstractmethod
    async def create_embedding(
        self,
        model: str,
        text: str,
        cancellation: Optional[CancellationSignal] = None,
    ) -> List[float]:
        """Embed a single text."""
