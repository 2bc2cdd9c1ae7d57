import inspect
from typing import Any, Dict, Annotated, get_args, get_origin

from pydantic import Field, BaseModel, ConfigDict
from pydantic.fields import FieldInfo

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

# Parameters filled in by the call processor rather than by the model.
INJECTED_PARAMETERS = frozenset({"context", "secure_context"})


class FieldTuple(BaseModel):
    """The (annotation, FieldInfo) pair pydantic's create_model expects for one field."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    annotation: Any
    field: FieldInfo


class ToolParameterFactory:
    """Turns the signature of a tool function into pydantic field definitions."""

    @classmethod
    def build_fields(cls, signature: inspect.Signature, tool_name: str) -> Dict[str, Any]:
        """Build create_model field definitions for every model-facing parameter.

        ``self`` and the injected ``context``/``secure_context`` parameters are skipped.

        Raises:
            ToolValidationError: For ``*args``/``**kwargs`` or parameters without a description.
        """
        fields: Dict[str, Any] = {}
        for param_name, param in signature.parameters.items():
            if param_name == "self" or param_name in INJECTED_PARAMETERS:
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                msg = f"Tool '{tool_name}' uses variadic parameter '{param_name}', which cannot be described to an LLM."
                logger.error(msg)
                raise ToolValidationError(msg)
            ft = cls.build_field_tuple(param_name=param_name, param=param, tool_name=tool_name)
            fields[param_name] = (ft.annotation, ft.field)
        return fields

    @classmethod
    def build_field_tuple(cls, param_name: str, param: inspect.Parameter, tool_name: str) -> FieldTuple:
        """Creates the (annotation, FieldInfo) tuple for a single function parameter.

        Args:
            param_name: The name of the parameter.
            param: The inspect.Parameter object.
            tool_name: The name of the tool for error reporting.

        Returns:
            A FieldTuple containing the type annotation and Pydantic Field configuration.
        """
        annotation = param.annotation
        description = cls._extract_description(annotation=annotation, param_name=param_name, tool_name=tool_name)
        default = param.default if param.default is not inspect.Parameter.empty else ...
        return FieldTuple(annotation=annotation, field=Field(default=default, description=description))

    @staticmethod
    def _extract_description(annotation: Any, param_name: str, tool_name: str) -> str:
        """Tool parameters must be annotated as ``Annotated[<type>, Field(description='...')]``.

        Raises:
            ToolValidationError: If the parameter is missing a Pydantic Field description.
        """
        if get_origin(annotation) is Annotated:
            for metadata in get_args(annotation):
                if isinstance(metadata, FieldInfo) and metadata.description:
                    return metadata.description

        msg = (
            f"Parameter '{param_name}' in tool '{tool_name}' is missing a description.\n"
            f"Usage: {param_name}: Annotated[Type, Field(description='...')] = ..."
        )
        logger.error(msg)
        raise ToolValidationError(msg)
