"""
Argument validation against a tool's parameter contract.

Each contract (a tuple of Param) is compiled once into a pydantic model and
cached. Scalars use pydantic's strict types, so "7" is not an integer and
true is not 1. The first error pydantic reports becomes the message the
caller sees; all of them are kept on the exception.
"""

import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Annotated, Any, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    create_model,
)

from checkmate_mcp.errors import ToolInvalidArgsError
from checkmate_mcp.tools.params import Param, ParamKind, contract_schema

_ARGS_CONFIG = ConfigDict(extra="ignore")

# pydantic error type -> reason shown to the caller
_TYPE_REASONS = {
    "missing": "is required",
    "int_type": "must be an integer",
    "int_from_float": "must be an integer",
    "string_type": "must be a string",
    "bool_type": "must be a boolean",
    "list_type": "must be an array",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "dict_type": "must be an object",
}


# =============================================================================
# Contract compilation
# =============================================================================


def _annotation(param: Param, model_name: str) -> Any:
    """Translate one Param into a pydantic type annotation."""
    if param.kind == ParamKind.INTEGER:
        ann: Any = Annotated[StrictInt, Field(ge=param.minimum, le=param.maximum)]
    elif param.kind == ParamKind.STRING:
        ann = Annotated[StrictStr, Field(min_length=param.min_length)]
    elif param.kind == ParamKind.BOOLEAN:
        ann = StrictBool
    elif param.kind == ParamKind.ENUM:
        ann = Literal[param.choices]
    elif param.kind == ParamKind.ARRAY:
        if param.items is None:
            element: Any = Any
        else:
            element = _annotation(param.items, f"{model_name}{_camel(param.name)}Item")
        ann = Annotated[list[element], Field(min_length=param.min_length)]
    elif param.kind == ParamKind.OBJECT:
        ann = _compile(param.fields, model_name)
    else:
        raise ValueError(f"Unknown parameter kind: {param.kind}")

    if param.nullable:
        ann = Optional[ann]
    return ann


def _compile(params: tuple[Param, ...], model_name: str) -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for param in params:
        ann = _annotation(param, model_name)
        if param.required:
            fields[param.name] = (ann, Field(..., description=param.description))
        else:
            fields[param.name] = (Optional[ann], Field(default=None, description=param.description))
    return create_model(model_name, __config__=_ARGS_CONFIG, **fields)


@lru_cache(maxsize=None)
def args_model(params: tuple[Param, ...], tool: str = "") -> type[BaseModel]:
    """
    Compile (and cache) the pydantic model for a contract.

    Args:
        params: The ordered parameter contract
        tool: Tool name, used only to name the generated model
    """
    return _compile(params, f"{_camel(tool) or 'Tool'}Arguments")


def _camel(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_\s]+", name) if part)


# =============================================================================
# Validation
# =============================================================================


def _location(loc: tuple[Any, ...]) -> str:
    """Render a pydantic location as a dotted path, e.g. tests[0].title."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "arguments"


def _reason(error: Mapping[str, Any]) -> str:
    """Describe one pydantic error in the adapter's wording."""
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind.endswith("_type") and error.get("input") is None:
        return "is required"
    if kind in _TYPE_REASONS:
        return _TYPE_REASONS[kind]
    if kind == "greater_than_equal":
        if ctx.get("ge") == 1:
            return "must be a positive integer"
        if ctx.get("ge") == 0:
            return "must be a non-negative integer"
        return f"must be >= {ctx.get('ge')}"
    if kind == "less_than_equal":
        return f"must be <= {ctx.get('le')}"
    if kind == "string_too_short":
        return "must not be empty"
    if kind == "too_short":
        return f"must contain at least {ctx.get('min_length')} item(s)"
    if kind == "literal_error":
        return f"must be one of: {ctx.get('expected')}"
    return str(error["msg"])


def validate_arguments(
    params: tuple[Param, ...],
    raw: Any,
    tool: str = "",
) -> dict[str, Any]:
    """
    Validate raw caller arguments against a contract.

    Args:
        params: The ordered parameter contract
        raw: Whatever the caller sent (None counts as no arguments)
        tool: Tool name, used in error context

    Returns:
        Plain dict of validated arguments in declared order. Absent or null
        optional arguments are omitted at every nesting level unless they
        declare a default or are nullable.

    Raises:
        ToolInvalidArgsError: Naming the first offending argument
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ToolInvalidArgsError(tool=tool, argument="arguments", reason="must be an object")

    model = args_model(params, tool)
    try:
        parsed = model.model_validate(dict(raw))
    except ValidationError as e:
        issues = [f"{_location(err['loc'])}: {_reason(err)}" for err in e.errors()]
        first = e.errors()[0]
        raise ToolInvalidArgsError(
            tool=tool,
            argument=_location(first["loc"]),
            reason=_reason(first),
            issues=issues,
        ) from None

    return _shape(params, parsed.model_dump(exclude_unset=True))


def _shape(params: tuple[Param, ...], supplied: Mapping[str, Any]) -> dict[str, Any]:
    """
    Order supplied values by declaration, at every nesting level.

    Nulls are dropped unless the param is nullable, blanks are dropped for
    omit_blank params, and defaults fill what is left absent.
    """
    result: dict[str, Any] = {}
    for param in params:
        value = supplied.get(param.name)
        if param.omit_blank and value == "":
            value = None
        if value is not None:
            result[param.name] = _shape_value(param, value)
        elif param.nullable and param.name in supplied:
            result[param.name] = None
        elif param.default is not None:
            result[param.name] = param.default
    return result


def _shape_value(param: Param, value: Any) -> Any:
    if param.kind == ParamKind.OBJECT:
        return _shape(param.fields, value)
    if param.kind == ParamKind.ARRAY and param.items is not None:
        return [_shape_value(param.items, item) for item in value]
    return value


def input_schema(params: tuple[Param, ...]) -> dict[str, Any]:
    """JSON Schema published for a contract on the tool-call surface."""
    return contract_schema(params)
