"""Streaming delta types and the assembler that turns them into messages."""

from .deltas import StreamDelta, TextDelta, ReasoningDelta, ToolCallDelta, UsageDelta
from .assembler import StreamAssembler, DeltaSource, ARGUMENT_PARSE_ERROR

__all__ = [
    "StreamDelta",
    "TextDelta",
    "ReasoningDelta",
    "ToolCallDelta",
    "UsageDelta",
    "StreamAssembler",
    "DeltaSource",
    "ARGUMENT_PARSE_ERROR",
]
