"""
Parameter contracts for tools.

A tool's contract is an ordered tuple of Param declarations. The order matters:
it is the order arguments appear in query strings, JSON bodies, usage hints and
the published JSON Schema, which keeps every request a deterministic function
of its arguments.

The constructors at the bottom of this module are the shared constraint
vocabulary (positive id, non-empty string, enum, non-empty array, optional...).
Tool modules should build their contracts from these rather than from raw
Param(...) calls.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ParamKind(str, Enum):
    """The JSON shape a parameter accepts."""

    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"


# How each kind is described to a calling agent in usage hints
_HINT_LABELS = {
    ParamKind.INTEGER: "number",
    ParamKind.STRING: "string",
    ParamKind.BOOLEAN: "boolean",
    ParamKind.ENUM: "enum",
    ParamKind.ARRAY: "array",
    ParamKind.OBJECT: "object",
}


@dataclass(frozen=True)
class Param:
    """
    One declared tool argument.

    Attributes:
        name: Argument name as sent by the caller
        kind: Accepted JSON shape
        description: Human-readable description
        required: Whether the caller must supply it
        minimum: Inclusive lower bound (integers)
        maximum: Inclusive upper bound (integers)
        min_length: Minimum string length or array item count
        choices: Allowed literals (enums)
        default: Value used when an optional argument is omitted
        items: Element constraint (arrays)
        fields: Nested contract (objects)
        nullable: Whether an explicit null is a meaningful value
        omit_blank: Treat an empty string as if the argument were omitted
    """

    name: str
    kind: ParamKind
    description: str = ""
    required: bool = True
    minimum: int | None = None
    maximum: int | None = None
    min_length: int | None = None
    choices: tuple[str, ...] = ()
    default: Any = None
    items: "Param | None" = None
    fields: tuple["Param", ...] = ()
    nullable: bool = False
    omit_blank: bool = False

    @property
    def type_label(self) -> str:
        """Short type name used in usage hints."""
        return _HINT_LABELS[self.kind]

    def usage_hint(self) -> str:
        """
        Describe this parameter for a calling agent.

        Example:
            "orgId (number, required): Organisation ID"
        """
        status = "required" if self.required else "optional"
        hint = f"{self.name} ({self.type_label}, {status})"
        details = self.description
        if self.choices:
            details += f" - one of {', '.join(repr(c) for c in self.choices)}"
        if self.default is not None:
            details += f" (default: {self.default})"
        return f"{hint}: {details}" if details else hint

    def json_schema(self) -> dict[str, Any]:
        """Render this declaration as a JSON Schema fragment."""
        schema: dict[str, Any]
        if self.kind == ParamKind.INTEGER:
            schema = {"type": "integer"}
            if self.minimum is not None:
                schema["minimum"] = self.minimum
            if self.maximum is not None:
                schema["maximum"] = self.maximum
        elif self.kind == ParamKind.STRING:
            schema = {"type": "string"}
            if self.min_length:
                schema["minLength"] = self.min_length
        elif self.kind == ParamKind.BOOLEAN:
            schema = {"type": "boolean"}
        elif self.kind == ParamKind.ENUM:
            schema = {"type": "string", "enum": list(self.choices)}
        elif self.kind == ParamKind.ARRAY:
            schema = {"type": "array"}
            if self.items is not None:
                schema["items"] = self.items.json_schema()
            if self.min_length:
                schema["minItems"] = self.min_length
        elif self.kind == ParamKind.OBJECT:
            schema = contract_schema(self.fields)
        else:
            raise ValueError(f"Unknown parameter kind: {self.kind}")

        if self.nullable:
            schema["type"] = [schema["type"], "null"]
        if self.description:
            schema["description"] = self.description
        if self.default is not None:
            schema["default"] = self.default
        return schema


def contract_schema(params: tuple[Param, ...]) -> dict[str, Any]:
    """Render a whole contract as a JSON Schema object."""
    return {
        "type": "object",
        "properties": {p.name: p.json_schema() for p in params},
        "required": [p.name for p in params if p.required],
        "additionalProperties": False,
    }


# =============================================================================
# Constraint Vocabulary
# =============================================================================


def positive_id(name: str, description: str, *, required: bool = True) -> Param:
    """An id-like integer that must be > 0."""
    return Param(name, ParamKind.INTEGER, description, required=required, minimum=1)


def integer(
    name: str,
    description: str,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
    required: bool = True,
) -> Param:
    """A bounded integer."""
    return Param(
        name, ParamKind.INTEGER, description, required=required, minimum=minimum, maximum=maximum
    )


def text(
    name: str,
    description: str,
    *,
    required: bool = True,
    allow_empty: bool = False,
    omit_blank: bool = False,
) -> Param:
    """A string; non-empty unless allow_empty is set. omit_blank drops "" instead of sending it."""
    return Param(
        name,
        ParamKind.STRING,
        description,
        required=required,
        min_length=None if allow_empty or omit_blank else 1,
        omit_blank=omit_blank,
    )


def flag(name: str, description: str, *, required: bool = True) -> Param:
    """A boolean."""
    return Param(name, ParamKind.BOOLEAN, description, required=required)


def choice(
    name: str,
    choices: tuple[str, ...],
    description: str,
    *,
    default: str | None = None,
    required: bool = True,
) -> Param:
    """One of a closed set of literal strings."""
    if default is not None and default not in choices:
        raise ValueError(f"default {default!r} is not one of {choices}")
    return Param(
        name,
        ParamKind.ENUM,
        description,
        required=required and default is None,
        choices=choices,
        default=default,
    )


def id_list(name: str, description: str, *, required: bool = True, non_empty: bool = True) -> Param:
    """An array of positive ids."""
    return Param(
        name,
        ParamKind.ARRAY,
        description,
        required=required,
        min_length=1 if non_empty else None,
        items=positive_id("", ""),
    )


def text_list(name: str, description: str, *, required: bool = True) -> Param:
    """A non-empty array of non-empty strings."""
    return Param(
        name, ParamKind.ARRAY, description, required=required, min_length=1, items=text("", "")
    )


def object_list(name: str, fields: tuple[Param, ...], description: str) -> Param:
    """A non-empty array of objects, each validated against its own contract."""
    return Param(
        name,
        ParamKind.ARRAY,
        description,
        min_length=1,
        items=Param("", ParamKind.OBJECT, fields=fields),
    )


# =============================================================================
# Common Arguments
# =============================================================================

ORG_ID = positive_id("orgId", "Organization ID")
PROJECT_ID = positive_id("projectId", "Project ID")
TEST_ID = positive_id("testId", "Test ID")
RUN_ID = positive_id("runId", "Run ID")
PAGE = positive_id("page", "Page number (default 1)", required=False)
PAGE_SIZE = positive_id("pageSize", "Page size", required=False)
PROJECT_PAGE_SIZE = integer("pageSize", "Page size (default 100, max 100)", minimum=1, maximum=100, required=False)
TEXT_SEARCH = text("textSearch", "Text search filter", required=False, omit_blank=True)
