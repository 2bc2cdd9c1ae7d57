from typing import Annotated, Any, Dict, List, Optional

import pytest
from pydantic import BaseModel, Field

from generic_tool_orchestrator.llm_core.exceptions import (
    NoExecutorError,
    NotDirectlyExecutableError,
    ToolNotFoundError,
    ToolRegistrationError,
    ToolValidationError,
)
from generic_tool_orchestrator.llm_core.tools.models import (
    ApprovalState,
    ExecutionState,
    FunctionDefinitionKind,
    FunctionKind,
    SubTaskKind,
    ToolCallClassification,
    ToolDefinition,
    TransferKind,
)
from generic_tool_orchestrator.llm_core.tools.execution import ToolCallProcessor
from generic_tool_orchestrator.llm_core.tools.registry import ToolRegistry


def get_weather(city: Annotated[str, Field(description="City name")]) -> Dict[str, Any]:
    """Current weather for a city."""
    return {"city": city, "temperature": 22}


class Shipment(BaseModel):
    order_id: str
    express: bool = False


def ship(shipment: Annotated[Shipment, Field(description="What to ship")]) -> Dict[str, Any]:
    """Ship an order."""
    return {"type": type(shipment).__name__, "order_id": shipment.order_id, "express": shipment.express}


def test_registry_tool_decorator(registry: ToolRegistry) -> None:
    @registry.tool
    def my_tool(x: Annotated[int, Field(description="An integer")]) -> int:
        """My tool description."""
        return x * 2

    assert "my_tool" in registry.tools
    tool_def = registry.tools["my_tool"]
    assert tool_def.description == "My tool description."
    assert isinstance(tool_def.kind, FunctionKind)
    assert tool_def.parameters["properties"]["x"] == {"type": "integer", "description": "An integer"}
    assert tool_def.parameters["required"] == ["x"]
    assert tool_def.parameters["additionalProperties"] is False
    # The decorated function stays usable
    assert my_tool(2) == 4


@pytest.mark.asyncio
async def test_inferred_tool_executes_with_keyword_arguments(registry: ToolRegistry) -> None:
    tool_def = registry.register(get_weather)
    assert await tool_def.execute({"city": "Sydney"}) == {"city": "Sydney", "temperature": 22}


@pytest.mark.asyncio
async def test_inferred_tool_receives_context_without_exposing_it(registry: ToolRegistry) -> None:
    seen: Dict[str, Any] = {}

    async def lookup(
        key: Annotated[str, Field(description="Lookup key")],
        context: Optional[Dict[str, Any]] = None,
        secure_context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Look something up."""
        seen.update(context=context, secure_context=secure_context)
        return key.upper()

    tool_def = registry.register(lookup)

    assert set(tool_def.parameters["properties"]) == {"key"}
    result = await tool_def.execute({"key": "abc"}, {"user": "u1"}, {"token": "secret"})
    assert result == "ABC"
    assert seen == {"context": {"user": "u1"}, "secure_context": {"token": "secret"}}


def test_register_requires_docstring(registry: ToolRegistry) -> None:
    def undocumented(x: Annotated[int, Field(description="An integer")]) -> int:
        return x

    with pytest.raises(ToolValidationError, match="missing docstring"):
        registry.register(undocumented)


def test_register_requires_parameter_description(registry: ToolRegistry) -> None:
    def bare(x: int) -> int:
        """Bare parameter."""
        return x

    with pytest.raises(ToolValidationError, match="missing a description"):
        registry.register(bare)


def test_register_duplicate_name_fails(registry: ToolRegistry) -> None:
    registry.register(get_weather)
    with pytest.raises(ToolRegistrationError, match="already registered"):
        registry.register(get_weather)


def test_register_many_is_all_or_nothing(registry: ToolRegistry) -> None:
    registry.register(get_weather)
    other = ToolDefinition(name="other", description="Other tool")

    with pytest.raises(ToolRegistrationError):
        registry.register_many([other, get_weather])
    assert "other" not in registry.tools


def test_register_by_name_normalizes_partial_schema(registry: ToolRegistry) -> None:
    tool_def = registry.register(
        "search",
        description="Search the web",
        func=lambda args, context, secure_context: [],
        parameters={"properties": {"query": {"type": "string"}}},
    )

    assert tool_def.parameters == {
        "type": "object",
        "properties": {"query": {"type": "string"}},
        "required": [],
        "additionalProperties": False,
    }


def test_register_by_name_without_func_is_definition_only(registry: ToolRegistry) -> None:
    tool_def = registry.register("describe_only", description="No executor", parameters={})
    assert isinstance(tool_def.kind, FunctionDefinitionKind)
    assert tool_def.parameters["type"] == "string"


def test_register_by_name_requires_description(registry: ToolRegistry) -> None:
    with pytest.raises(ToolRegistrationError, match="description"):
        registry.register("nameless", parameters={"type": "object"})


def test_pydantic_model_parameters_are_flattened() -> None:
    class Address(BaseModel):
        street: str
        zip_code: Optional[str] = None

    class Order(BaseModel):
        items: List[str]
        address: Address

    tool_def = ToolDefinition(name="order", description="Place an order", parameters=Order)

    assert "$defs" not in tool_def.parameters
    assert "title" not in tool_def.parameters
    address = tool_def.parameters["properties"]["address"]
    assert address["type"] == "object"
    assert address["additionalProperties"] is False
    assert address["properties"]["zip_code"]["type"] == "string"


def test_recursive_model_parameters_are_rejected() -> None:
    class Node(BaseModel):
        value: int
        children: List["Node"] = []

    with pytest.raises(ToolValidationError, match="Recursive structure detected"):
        ToolDefinition(name="tree", description="Walk a tree", parameters=Node)


def test_unregister(registry: ToolRegistry) -> None:
    registry.register(get_weather)
    registry.unregister("get_weather")
    assert not registry.has_tools

    with pytest.raises(ToolNotFoundError):
        registry.unregister("get_weather")


@pytest.mark.parametrize("kind", [TransferKind(), SubTaskKind()])
def test_delegated_tools_cannot_be_unregistered(registry: ToolRegistry, kind: Any) -> None:
    registry.register(ToolDefinition(name="hand_off", description="Hand off", kind=kind))
    with pytest.raises(ToolRegistrationError):
        registry.unregister("hand_off")


def test_get_and_require(registry: ToolRegistry) -> None:
    registry.register(get_weather)
    assert registry.get("get_weather") is registry.tools["get_weather"]
    assert registry.get("missing") is None
    with pytest.raises(ToolNotFoundError):
        registry.require("missing")


def test_tools_dict_is_shared_by_reference(registry: ToolRegistry) -> None:
    tools = registry.tools
    registry.register(get_weather)
    assert "get_weather" in tools


def test_as_llm_functions(registry: ToolRegistry) -> None:
    assert registry.as_llm_functions is None

    registry.register(
        ToolDefinition(name="test", description="test tool", parameters={"type": "object", "properties": {"foo": {"type": "string"}}})
    )

    assert registry.as_llm_functions == [
        {
            "type": "function",
            "function": {
                "name": "test",
                "description": "test tool",
                "parameters": {
                    "type": "object",
                    "properties": {"foo": {"type": "string"}},
                    "required": [],
                    "additionalProperties": False,
                },
            },
        }
    ]


def test_with_allowed_tools_only(registry: ToolRegistry) -> None:
    registry.register(get_weather)
    registry.register(ToolDefinition(name="other", description="Other tool"))

    restricted = registry.with_allowed_tools_only(["other", "unknown"])

    assert list(restricted.tools) == ["other"]
    assert restricted.tools["other"] is registry.tools["other"]
    assert len(registry.tools) == 2


def test_classify_tool_calls_priority(registry: ToolRegistry, make_call) -> None:
    registry.register(get_weather)
    registry.register(ToolDefinition(name="describe_only", description="No executor"))
    registry.register(ToolDefinition(name="hand_off", description="Hand off", kind=TransferKind()))

    runnable = make_call(call_id="a")
    no_executor = make_call(name="describe_only", call_id="b")
    transfer = make_call(name="hand_off", call_id="c")
    gated = make_call(call_id="d", approval_state=ApprovalState.REQUIRES_APPROVAL)

    assert registry.classify_tool_calls([]) == ToolCallClassification.COMPLETED
    assert registry.classify_tool_calls([runnable, transfer, no_executor, gated]) == ToolCallClassification.APPROVAL_PENDING
    assert registry.classify_tool_calls([runnable, transfer, no_executor]) == ToolCallClassification.MISSING_EXECUTOR
    assert registry.classify_tool_calls([runnable, transfer]) == ToolCallClassification.TRANSFER_PENDING
    assert registry.classify_tool_calls([runnable]) == ToolCallClassification.EXECUTION_PENDING
    assert registry.classify_tool_calls([runnable.completed({})]) == ToolCallClassification.COMPLETED
    # Settled delegated calls do not block
    assert registry.classify_tool_calls([transfer.completed({"ok": True})]) == ToolCallClassification.COMPLETED


def test_classify_tool_calls_unknown_tool(registry: ToolRegistry, make_call) -> None:
    with pytest.raises(ToolNotFoundError):
        registry.classify_tool_calls([make_call(name="nope")])


@pytest.mark.asyncio
async def test_execute_rejects_wrong_kinds() -> None:
    with pytest.raises(NoExecutorError):
        await ToolDefinition(name="a", description="a").execute({})
    with pytest.raises(NotDirectlyExecutableError):
        await ToolDefinition(name="b", description="b", kind=TransferKind()).execute({})
    with pytest.raises(NotDirectlyExecutableError):
        await ToolDefinition(name="c", description="c", kind=SubTaskKind()).execute({})


@pytest.mark.asyncio
async def test_execute_sync_and_async_executors() -> None:
    def sync_executor(args, context, secure_context):
        return {"sum": args["a"] + args["b"], "user": context.get("user")}

    async def async_executor(args, context, secure_context):
        return secure_context["token"]

    sync_tool = ToolDefinition(name="add", description="Add", kind=FunctionKind(executor=sync_executor))
    async_tool = ToolDefinition(name="tok", description="Token", kind=FunctionKind(executor=async_executor))

    assert await sync_tool.execute({"a": 1, "b": 2}, {"user": "u1"}) == {"sum": 3, "user": "u1"}
    assert await async_tool.execute({}, secure_context={"token": "t"}) == "t"


@pytest.mark.asyncio
async def test_inferred_tool_receives_model_arguments(registry: ToolRegistry) -> None:
    tool_def = registry.register(ship)

    assert tool_def.parameters["properties"]["shipment"]["properties"]["order_id"] == {"type": "string"}
    result = await tool_def.execute({"shipment": {"order_id": "X1", "express": "true"}})
    assert result == {"type": "Shipment", "order_id": "X1", "express": True}


@pytest.mark.asyncio
async def test_inferred_tool_with_model_argument_completes(registry: ToolRegistry, make_call) -> None:
    registry.register(ship)
    processor = ToolCallProcessor(registry)

    processed = await processor.process_tool_call(make_call(name="ship", arguments={"shipment": {"order_id": "X1"}}))

    assert processed.tool_call.execution_state == ExecutionState.COMPLETED
    assert processed.tool_call.result == {"type": "Shipment", "order_id": "X1", "express": False}
