"""Tool definitions and the kinds of tools the engine knows about."""

from __future__ import annotations

import asyncio
import inspect
from typing import Annotated, Any, Callable, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...exceptions import NoExecutorError, NotDirectlyExecutableError
from ...logger import get_logger
from ..schema import SchemaValidator

logger = get_logger(__name__)

ToolContext = Mapping[str, Any]
ToolExecutor = Callable[[Any, ToolContext, ToolContext], Any]


class FunctionKind(BaseModel):
    """A tool backed by an executor ``executor(args, context, secure_context)``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: Literal["function"] = "function"
    executor: Callable[..., Any]


class FunctionDefinitionKind(BaseModel):
    """A tool that is only described to the model; no executor is bound."""

    model_config = ConfigDict(frozen=True)

    type: Literal["functionDefinition"] = "functionDefinition"


class TransferKind(BaseModel):
    """Hand-off to another agent. Resolved by an external delegation mechanism."""

    model_config = ConfigDict(frozen=True)

    type: Literal["transfer"] = "transfer"


class SubTaskKind(BaseModel):
    """Delegated sub task. Resolved by an external delegation mechanism."""

    model_config = ConfigDict(frozen=True)

    type: Literal["subTask"] = "subTask"


ToolKind = Annotated[
    Union[FunctionKind, FunctionDefinitionKind, TransferKind, SubTaskKind],
    Field(discriminator="type"),
]

DELEGATED_KINDS = (TransferKind, SubTaskKind)


class ToolDefinition(BaseModel):
    """
    Represents the definition of a tool that can be offered to an LLM.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        parameters: Normalized JSON schema of the tool's arguments. Partial schemas
                    and pydantic model classes are normalized on construction.
        kind: How the tool is resolved (executor, definition only, transfer, sub task).
        requires_confirmation: Whether calls to this tool need approval before execution.
        args_model: Optional Pydantic model used for validating and coercing arguments.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    description: str
    parameters: Optional[Dict[str, Any]] = None
    kind: ToolKind = Field(default_factory=FunctionDefinitionKind)
    requires_confirmation: bool = False
    args_model: Optional[Type[BaseModel]] = None

    @field_validator("parameters", mode="before")
    @classmethod
    def _normalize_parameters(cls, value: Any) -> Any:
        if value is None:
            return None
        return SchemaValidator.normalize_parameters(value)

    @property
    def kind_name(self) -> str:
        return self.kind.type

    @property
    def executor(self) -> Optional[Callable[..., Any]]:
        return self.kind.executor if isinstance(self.kind, FunctionKind) else None

    @property
    def is_delegated(self) -> bool:
        """True for transfer and sub-task tools."""
        return isinstance(self.kind, DELEGATED_KINDS)

    @property
    def as_llm_function(self) -> Dict[str, Any]:
        """The tool in the exposure format handed to providers."""
        function: Dict[str, Any] = {"name": self.name, "description": self.description}
        if self.parameters is not None:
            function["parameters"] = self.parameters
        return {"type": "function", "function": function}

    async def execute(
        self,
        args: Any,
        context: Optional[ToolContext] = None,
        secure_context: Optional[ToolContext] = None,
    ) -> Any:
        """Execute the tool.

        Sync executors run in a worker thread so they do not block the event loop.

        Args:
            args: Deserialized arguments.
            context: Contextual data (may appear in logs).
            secure_context: Secure contextual data (never logged).

        Returns:
            Whatever the executor returns.

        Raises:
            NotDirectlyExecutableError: For transfer and sub-task tools.
            NoExecutorError: For tools without an executor.
        """
        if self.is_delegated:
            msg = f"Tool '{self.name}' of kind '{self.kind_name}' cannot be executed directly."
            logger.error(msg)
            raise NotDirectlyExecutableError(msg)

        executor = self.executor
        if executor is None:
            msg = f"Executor not defined for tool: {self.name}"
            logger.error(msg)
            raise NoExecutorError(msg)

        if self.args_model is not None and isinstance(args, dict):
            # Keep nested models and coerced values as the executor declared them
            validated = self.args_model.model_validate(args)
            args = {name: getattr(validated, name) for name in type(validated).model_fields}

        call_args = (args, dict(context or {}), dict(secure_context or {}))
        if inspect.iscoroutinefunction(executor):
            return await executor(*call_args)

        result = await asyncio.to_thread(executor, *call_args)
        if inspect.isawaitable(result):
            return await result
        return result
