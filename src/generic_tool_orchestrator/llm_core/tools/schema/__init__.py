"""Tool schema generation and validation."""

from .schema_validator import SchemaValidator
from .tool_param_factory import ToolParameterFactory, FieldTuple, INJECTED_PARAMETERS

__all__ = ["SchemaValidator", "ToolParameterFactory", "FieldTuple", "INJECTED_PARAMETERS"]
