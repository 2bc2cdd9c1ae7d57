"""Tool registry and helpers for turning plain functions into tools."""

import inspect
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union, cast

from pydantic import create_model

from ..models import (
    ApprovalState,
    ExecutionState,
    FunctionKind,
    FunctionDefinitionKind,
    SubTaskKind,
    ToolCall,
    ToolCallClassification,
    ToolDefinition,
    TransferKind,
)
from ..schema import INJECTED_PARAMETERS, SchemaValidator, ToolParameterFactory
from ...exceptions import ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

ToolLike = Union[ToolDefinition, Callable[..., Any]]


class ToolRegistry:
    """
    A central registry to manage and access all available LLM tools.

    Tools are kept in a dict keyed by name. ``tools`` hands out that dict by
    reference, so registrations made later are visible to every holder.
    Concurrent register/unregister calls are not synchronized.
    """

    def __init__(
        self,
        tools: Optional[Iterable[ToolLike]] = None,
        allow_parallel_calls: bool = True,
    ) -> None:
        """Initialize the ToolRegistry.

        Args:
            tools: Optional tools to register right away.
            allow_parallel_calls: Forwarded to providers; the call processor always runs calls in order.
        """
        self.tools: Dict[str, ToolDefinition] = {}
        self.allow_parallel_calls = allow_parallel_calls
        if tools:
            self.register_many(tools)

    def register(
        self,
        name_or_tool: Union[str, ToolLike],
        description: Optional[str] = None,
        func: Optional[Callable[..., Any]] = None,
        parameters: Optional[Any] = None,
        requires_confirmation: bool = False,
    ) -> ToolDefinition:
        """
        Register a new tool for the LLM.

        A tool is given either as a ready `ToolDefinition`, as a plain function whose
        definition is inferred from its signature and docstring, or as individual parts
        (name, description, function, parameters).

        Args:
            name_or_tool: A `ToolDefinition`, a callable, or the tool name.
            description: What the tool does. Required when a name and parameters are given.
            func: The function implementing the tool. Without it the tool is a definition only.
            parameters: A (partial) JSON schema or pydantic model for the tool's input.
            requires_confirmation: Whether calls to this tool need approval first.

        Returns:
            The registered ToolDefinition.

        Raises:
            ToolRegistrationError: If parts are missing or a tool of that name already exists.
        """
        tool = self._to_definition(name_or_tool, description, func, parameters, requires_confirmation)
        self._ensure_unregistered(tool.name)
        self.tools[tool.name] = tool
        logger.info(f"Successfully registered tool: '{tool.name}'")
        return tool

    def register_many(self, tools: Iterable[ToolLike]) -> List[ToolDefinition]:
        """Register several tools. Nothing is registered if any name is already taken."""
        definitions = [self._to_definition(tool) for tool in tools]
        seen: set = set()
        for definition in definitions:
            self._ensure_unregistered(definition.name)
            if definition.name in seen:
                msg = f"Tool '{definition.name}' is given more than once."
                logger.error(msg)
                raise ToolRegistrationError(msg)
            seen.add(definition.name)

        for definition in definitions:
            self.tools[definition.name] = definition
        logger.info(f"Successfully registered {len(definitions)} tool(s).")
        return definitions

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Args:
            tool_name: The name of the tool to remove.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
            ToolRegistrationError: If the tool is a transfer or sub-task tool.
        """
        tool = self.tools.get(tool_name)
        if tool is None:
            msg = f"Tool '{tool_name}' not found in the registry."
            logger.error(msg)
            raise ToolNotFoundError(msg)
        if isinstance(tool.kind, (TransferKind, SubTaskKind)):
            msg = f"Tool '{tool_name}' of kind '{tool.kind_name}' cannot be unregistered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        del self.tools[tool_name]
        logger.info(f"Successfully unregistered tool: '{tool_name}'")

    def tool(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """A decorator to turn a function into an LLM tool.

        Args:
            func: The function to decorate.

        Returns:
            The original function, after registering it as a tool.
        """
        self.register(func)
        return func

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self.tools.get(name)

    def require(self, name: str) -> ToolDefinition:
        """Like :meth:`get`, but raises ToolNotFoundError for unknown names."""
        tool = self.tools.get(name)
        if tool is None:
            msg = f"Tool '{name}' not found in the registry."
            logger.error(msg)
            raise ToolNotFoundError(msg)
        return tool

    @property
    def has_tools(self) -> bool:
        return len(self.tools) > 0

    @property
    def as_llm_functions(self) -> Optional[List[Dict[str, Any]]]:
        """The tools in provider exposure format, or None when the registry is empty."""
        if not self.tools:
            return None
        return [tool.as_llm_function for tool in self.tools.values()]

    def with_allowed_tools_only(self, names: Sequence[str]) -> "ToolRegistry":
        """Return a new registry restricted to the given tool names.

        Unknown names are ignored. The definitions themselves are shared.
        """
        allowed = set(names)
        restricted = ToolRegistry(allow_parallel_calls=self.allow_parallel_calls)
        restricted.tools.update({name: tool for name, tool in self.tools.items() if name in allowed})
        return restricted

    def classify_tool_calls(self, tool_calls: Sequence[ToolCall]) -> ToolCallClassification:
        """Classify a set of tool calls against the registered tools.

        Priority: approvalPending, missingExecutor, transferPending, executionPending, completed.

        Raises:
            ToolNotFoundError: If a call names a tool that is not registered.
        """
        if any(call.approval_state == ApprovalState.REQUIRES_APPROVAL for call in tool_calls):
            return ToolCallClassification.APPROVAL_PENDING

        open_kinds = []
        for call in tool_calls:
            definition = self.require(call.name)
            if call.execution_state in (ExecutionState.PENDING, ExecutionState.IN_PROGRESS):
                open_kinds.append(definition.kind)

        if any(isinstance(kind, FunctionDefinitionKind) for kind in open_kinds):
            return ToolCallClassification.MISSING_EXECUTOR
        if any(isinstance(kind, (TransferKind, SubTaskKind)) for kind in open_kinds):
            return ToolCallClassification.TRANSFER_PENDING
        if open_kinds:
            return ToolCallClassification.EXECUTION_PENDING
        return ToolCallClassification.COMPLETED

    def _ensure_unregistered(self, name: str) -> None:
        if name in self.tools:
            msg = f"Tool '{name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

    def _to_definition(
        self,
        name_or_tool: Union[str, ToolLike],
        description: Optional[str] = None,
        func: Optional[Callable[..., Any]] = None,
        parameters: Optional[Any] = None,
        requires_confirmation: bool = False,
    ) -> ToolDefinition:
        if isinstance(name_or_tool, ToolDefinition):
            return name_or_tool
        if callable(name_or_tool):
            return self._generate_tool_definition(
                name_or_tool, description=description, requires_confirmation=requires_confirmation
            )
        if not isinstance(name_or_tool, str):
            msg = f"Cannot register object of type {type(name_or_tool).__name__} as a tool."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        if func is not None and parameters is None:
            return self._generate_tool_definition(
                func, name=name_or_tool, description=description, requires_confirmation=requires_confirmation
            )
        if description is None:
            msg = "If passing the name as string, a description is required."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        kind = FunctionKind(executor=func) if func is not None else FunctionDefinitionKind()
        return ToolDefinition(
            name=name_or_tool,
            description=description,
            parameters=parameters,
            kind=kind,
            requires_confirmation=requires_confirmation,
        )

    def _generate_tool_definition(
        self,
        func: Callable[..., Any],
        name: Optional[str] = None,
        description: Optional[str] = None,
        requires_confirmation: bool = False,
    ) -> ToolDefinition:
        """Generate a ToolDefinition from a callable function.

        Args:
            func: The function to generate a definition for.
            name: Optional name override for the tool.
            description: Optional description override for the tool.
            requires_confirmation: Whether calls to this tool need approval first.

        Returns:
            A ToolDefinition whose executor calls ``func`` with the validated arguments as keywords.

        Raises:
            ToolValidationError: If the function is missing a docstring or parameter descriptions.
        """
        tool_name = name or func.__name__
        if description is None:
            description = self._get_docstring_from_func(func, tool_name)

        signature = inspect.signature(func, eval_str=True)
        fields = ToolParameterFactory.build_fields(signature, tool_name)

        # create_model takes **field_definitions: Any
        dynamic_params_model = create_model(f"{tool_name}Params", **cast(Dict[str, Any], fields))
        parameters_schema = SchemaValidator.schema_from_model(dynamic_params_model)

        return ToolDefinition(
            name=tool_name,
            description=description,
            parameters=parameters_schema,
            kind=FunctionKind(executor=self._keyword_executor(func, signature)),
            requires_confirmation=requires_confirmation,
            args_model=dynamic_params_model,
        )

    @staticmethod
    def _keyword_executor(func: Callable[..., Any], signature: inspect.Signature) -> Callable[..., Any]:
        """Adapt ``func(**args)`` to the ``executor(args, context, secure_context)`` convention."""
        injected = INJECTED_PARAMETERS & set(signature.parameters)

        def build_kwargs(args: Any, context: Any, secure_context: Any) -> Dict[str, Any]:
            kwargs = dict(args or {})
            if "context" in injected:
                kwargs["context"] = context
            if "secure_context" in injected:
                kwargs["secure_context"] = secure_context
            return kwargs

        if inspect.iscoroutinefunction(func):

            async def async_executor(args: Any, context: Any, secure_context: Any) -> Any:
                return await func(**build_kwargs(args, context, secure_context))

            return async_executor

        def sync_executor(args: Any, context: Any, secure_context: Any) -> Any:
            return func(**build_kwargs(args, context, secure_context))

        return sync_executor

    @staticmethod
    def _get_docstring_from_func(func: Callable[..., Any], tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc
