from typing import Any, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv, find_dotenv
from openai import AsyncOpenAI

from generic_tool_orchestrator.llm_core.tools.models import (
    ApprovalState,
    ExecutionState,
    ToolCall,
    ToolCallFunction,
    ToolCallRequest,
)
from generic_tool_orchestrator.llm_core.tools.registry import ToolRegistry

# Load environment variables from .env file, if the project has one
env_file = find_dotenv(usecwd=True)
if env_file:
    load_dotenv(env_file)


@pytest.fixture
def mock_openai_client() -> Any:
    client = MagicMock(spec=AsyncOpenAI)
    client.chat = MagicMock()
    client.chat.completions = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.models = MagicMock()
    client.models.list = AsyncMock()
    client.embeddings = MagicMock()
    client.embeddings.create = AsyncMock()
    return client


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry()


@pytest.fixture
def make_call() -> Callable[..., ToolCall]:
    """Factory for tool calls; ``call_id`` doubles as the provider request id."""

    def _make(
        name: str = "get_weather",
        arguments: Optional[dict] = None,
        call_id: str = "call_1",
        approval_state: ApprovalState = ApprovalState.NO_APPROVAL_REQUIRED,
        execution_state: ExecutionState = ExecutionState.PENDING,
        **extra: Any,
    ) -> ToolCall:
        return ToolCall(
            id=call_id,
            approval_state=approval_state,
            execution_state=execution_state,
            request=ToolCallRequest(
                id=call_id, function=ToolCallFunction(name=name, arguments=arguments if arguments is not None else {})
            ),
            **extra,
        )

    return _make
