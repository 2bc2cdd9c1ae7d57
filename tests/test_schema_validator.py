import pytest
from pydantic import BaseModel

from generic_tool_orchestrator.llm_core.tools.schema import SchemaValidator
from generic_tool_orchestrator.llm_core.exceptions import ToolValidationError


def test_assert_no_recursive_refs_no_recursion():
    schema = {
        "type": "object",
        "properties": {
            "prop1": {"type": "string"},
            "prop2": {"type": "object", "properties": {"subprop": {"type": "integer"}}},
        },
    }
    # Should not raise
    SchemaValidator.assert_no_recursive_refs(schema)


def test_assert_no_recursive_refs_with_recursion():
    schema = {
        "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
        "properties": {"root": {"$ref": "#/$defs/Node"}},
    }
    with pytest.raises(ToolValidationError, match="Recursive structure detected"):
        SchemaValidator.assert_no_recursive_refs(schema)


def test_sanitize_schema_removes_metadata():
    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "$id": "http://example.com/schema",
        "title": "MySchema",
        "type": "object",
        "properties": {"field": {"type": "string", "title": "FieldTitle"}},
        "definitions": {"SomeDef": {}},
    }
    sanitized = SchemaValidator.sanitize_schema(schema)

    assert "$schema" not in sanitized
    assert "$id" not in sanitized
    assert "title" not in sanitized
    assert "definitions" not in sanitized
    assert "title" not in sanitized["properties"]["field"]


def test_sanitize_schema_keeps_property_named_title():
    schema = {"type": "object", "properties": {"title": {"type": "string"}}}
    sanitized = SchemaValidator.sanitize_schema(schema)
    assert sanitized["properties"] == {"title": {"type": "string"}}


def test_sanitize_schema_simplifies_optional():
    schema = {
        "type": "object",
        "properties": {
            "optional_field": {
                "anyOf": [{"type": "integer", "description": "An integer"}, {"type": "null"}],
                "description": "Parent description",
            }
        },
    }
    field = SchemaValidator.sanitize_schema(schema)["properties"]["optional_field"]

    assert "anyOf" not in field
    assert field["type"] == "integer"
    assert field["description"] == "Parent description"


def test_sanitize_schema_enforces_additional_properties():
    schema = {"type": "object", "properties": {"field": {"type": "string"}}}
    assert SchemaValidator.sanitize_schema(schema)["additionalProperties"] is False


@pytest.mark.parametrize(
    "partial, expected_type",
    [
        ({"items": {"type": "string"}}, "array"),
        ({"properties": {"a": {"type": "string"}}}, "object"),
        ({}, "string"),
        ({"type": "number"}, "number"),
    ],
)
def test_normalize_parameters_infers_type(partial, expected_type):
    normalized = SchemaValidator.normalize_parameters(partial)
    assert normalized["type"] == expected_type
    assert normalized["required"] == []
    assert normalized["additionalProperties"] is False


def test_normalize_parameters_keeps_explicit_values():
    partial = {"type": "object", "required": ["a"], "additionalProperties": True, "description": "kept"}
    normalized = SchemaValidator.normalize_parameters(partial)

    assert normalized == partial
    assert normalized is not partial


def test_normalize_parameters_from_model():
    class Query(BaseModel):
        text: str
        limit: int = 10

    normalized = SchemaValidator.normalize_parameters(Query)

    assert normalized["type"] == "object"
    assert normalized["required"] == ["text"]
    assert normalized["properties"]["limit"] == {"type": "integer", "default": 10}


def test_normalize_parameters_rejects_other_values():
    with pytest.raises(ToolValidationError):
        SchemaValidator.normalize_parameters(["not", "a", "schema"])
