from typing import Any, Dict, Set

import jsonref  # type: ignore
from pydantic import BaseModel

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class SchemaValidator:
    """
    Helper class for normalizing, validating and sanitizing JSON schemas for LLM tools.
    """

    @classmethod
    def normalize_parameters(cls, parameters: Any) -> Dict[str, Any]:
        """
        Turns a partial parameter schema, or a pydantic model class, into a complete one.

        The top-level ``type`` is inferred when missing: ``array`` if ``items`` is present,
        ``object`` if ``properties`` is present, ``string`` otherwise. ``required`` defaults
        to an empty list and ``additionalProperties`` to ``False``. Other keys are preserved.

        Args:
            parameters: A (partial) JSON schema dict or a pydantic model class.

        Returns:
            The normalized schema.

        Raises:
            ToolValidationError: If the input is neither a dict nor a model class, or if a
                model schema contains recursive references.
        """
        if isinstance(parameters, type) and issubclass(parameters, BaseModel):
            parameters = cls.schema_from_model(parameters)

        if not isinstance(parameters, dict):
            msg = f"Tool parameters must be a JSON schema dict or a pydantic model, got {type(parameters).__name__}."
            logger.error(msg)
            raise ToolValidationError(msg)

        normalized = dict(parameters)
        if "type" not in normalized:
            if "items" in normalized:
                normalized["type"] = "array"
            elif "properties" in normalized:
                normalized["type"] = "object"
            else:
                normalized["type"] = "string"
        normalized.setdefault("required", [])
        normalized.setdefault("additionalProperties", False)
        return normalized

    @classmethod
    def schema_from_model(cls, model: type[BaseModel]) -> Dict[str, Any]:
        """Build a flat, provider-friendly schema from a pydantic model class."""
        raw_schema = model.model_json_schema()
        cls.assert_no_recursive_refs(raw_schema)
        # proxies=False gives plain dicts instead of JsonRef objects
        resolved = jsonref.replace_refs(raw_schema, proxies=False)
        return cls.sanitize_schema(resolved)

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Checks if the schema contains recursive references by traversing the graph.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def check(node: Any, path: Set[str]) -> None:
            if isinstance(node, dict):
                if "$ref" in node:
                    ref = node["$ref"]
                    if ref in path:
                        msg = (
                            f"Recursive structure detected: {ref}. "
                            "Recursive structures are not allowed in tool inputs. "
                            "Use parent ids or flat lists instead."
                        )
                        logger.error(msg)
                        raise ToolValidationError(msg)

                    # local refs look like #/$defs/MyModel
                    if ref.startswith("#"):
                        def_name = ref.split("/")[-1]
                        if def_name in defs:
                            check(defs[def_name], path | {ref})
                    return

                for value in node.values():
                    check(value, path)
            elif isinstance(node, list):
                for item in node:
                    check(item, path)

        check(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up a schema for LLM providers.

        Drops $defs, $schema, $id and title, collapses ``anyOf`` with ``null`` into the
        single remaining type, and closes objects with ``additionalProperties: false``.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        new_schema = schema.copy()

        for key in ("$defs", "$schema", "$id", "title", "definitions"):
            new_schema.pop(key, None)

        if "anyOf" in new_schema:
            non_null = [x for x in new_schema["anyOf"] if not (isinstance(x, dict) and x.get("type") == "null")]
            if len(non_null) == 1 and isinstance(non_null[0], dict):
                merged = {k: v for k, v in new_schema.items() if k != "anyOf"}
                merged.update(non_null[0])
                if "description" in new_schema:
                    merged["description"] = new_schema["description"]
                return SchemaValidator.sanitize_schema(merged)

        if new_schema.get("type") == "object":
            new_schema.setdefault("additionalProperties", False)

        for key, value in new_schema.items():
            if key == "properties" and isinstance(value, dict):
                # property names are not schema keywords; a property may be called "title"
                new_schema[key] = {name: SchemaValidator.sanitize_schema(prop) for name, prop in value.items()}
            elif isinstance(value, dict):
                new_schema[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                new_schema[key] = [
                    SchemaValidator.sanitize_schema(item) if isinstance(item, dict) else item for item in value
                ]

        return new_schema
