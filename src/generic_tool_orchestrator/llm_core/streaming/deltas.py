"""Provider-neutral stream deltas.

Adapters translate vendor chunks into these before handing them to the
:class:`StreamAssembler`.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel


class TextDelta(BaseModel):
    type: Literal["text"] = "text"
    content: str


class ReasoningDelta(BaseModel):
    type: Literal["reasoning"] = "reasoning"
    content: str


class ToolCallDelta(BaseModel):
    """A fragment of one tool call. Fragments sharing an ``index`` belong to the same call.

    Attributes:
        index: Provider slot index. Slots may arrive in any order.
        id: Fragment of the provider call id.
        name: Fragment of the function name.
        arguments: Fragment of the JSON argument text.
    """

    type: Literal["toolCall"] = "toolCall"
    index: int
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: Optional[str] = None


class UsageDelta(BaseModel):
    """Token counts reported by the provider. Counts are added up across deltas."""

    type: Literal["usage"] = "usage"
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None


StreamDelta = Union[TextDelta, ReasoningDelta, ToolCallDelta, UsageDelta]
