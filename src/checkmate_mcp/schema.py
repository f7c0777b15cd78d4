"""
Schema definitions for checkmate-mcp.

This module defines the Pydantic models shared across the adapter:
- TextContent/ImageContent/ResourceContent: tagged content blocks
- ToolResponse: the envelope every tool invocation returns
- Settings/RequestContext: process configuration and the dispatcher's view of it

Design Decisions:
    - Content blocks are a discriminated union on the "type" field, so a
      renderer can match every variant explicitly
    - Envelopes are immutable and always carry at least one content block
    - Wire names (isError, mimeType, _meta) are aliases; Python code uses
      snake_case attributes
"""

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from checkmate_mcp.errors import ConfigError


# =============================================================================
# Content Blocks
# =============================================================================


class TextContent(BaseModel):
    """A plain text block."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    """A base64-encoded image block."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type: Literal["image"] = "image"
    data: str = Field(..., description="Base64-encoded image bytes")
    mime_type: str = Field(..., alias="mimeType")


class EmbeddedResource(BaseModel):
    """Text contents of a resource embedded in a response."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    uri: str
    mime_type: str = Field(default="text/plain", alias="mimeType")
    text: str


class ResourceContent(BaseModel):
    """A block carrying an embedded resource."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["resource"] = "resource"
    resource: EmbeddedResource


ContentBlock = Annotated[
    Union[TextContent, ImageContent, ResourceContent],
    Field(discriminator="type"),
]


# =============================================================================
# Response Envelope
# =============================================================================


class ToolResponse(BaseModel):
    """
    The uniform envelope returned by every tool invocation.

    Attributes:
        content: Ordered, non-empty content blocks
        is_error: True when the call failed or found nothing
        meta: Optional metadata mapping (wire name "_meta")
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    content: list[ContentBlock] = Field(..., min_length=1)
    is_error: bool = Field(default=False, alias="isError")
    meta: dict[str, Any] | None = Field(default=None, alias="_meta")

    @classmethod
    def ok(cls, text: str, **meta: Any) -> "ToolResponse":
        """Create a successful single-text response."""
        return cls(content=[TextContent(text=text)], is_error=False, meta=meta or None)

    @classmethod
    def fail(cls, text: str, **meta: Any) -> "ToolResponse":
        """Create an error single-text response."""
        return cls(content=[TextContent(text=text)], is_error=True, meta=meta or None)

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "\n".join(block.text for block in self.content if isinstance(block, TextContent))

    def to_wire(self) -> dict[str, Any]:
        """Serialize using the wire field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Configuration
# =============================================================================

LogLevel = Literal["error", "warn", "info", "debug"]

# Environment variable -> Settings field
ENV_VARS = {
    "CHECKMATE_API_BASE": "api_base",
    "CHECKMATE_API_TOKEN": "api_token",
    "LOG_LEVEL": "log_level",
    "REQUEST_TIMEOUT": "request_timeout",
}


@dataclass(frozen=True)
class RequestContext:
    """
    Static dispatch configuration: where to send requests and as whom.

    Built once at startup and never mutated, so concurrent tool calls
    can share it freely.
    """

    base_url: str
    token: str
    timeout_ms: int = 30000

    def __repr__(self) -> str:
        return f"RequestContext(base_url={self.base_url!r}, timeout_ms={self.timeout_ms})"


class Settings(BaseModel):
    """
    Process configuration.

    Attributes:
        api_base: Base URL of the Checkmate API (http or https)
        api_token: Bearer token attached to every request
        log_level: One of error, warn, info, debug
        request_timeout: Transport timeout in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_base: str = Field(..., description="Base URL of the Checkmate API")
    api_token: str = Field(..., min_length=1, description="API bearer token", repr=False)
    log_level: LogLevel = Field(default="info", description="Log verbosity")
    request_timeout: int = Field(default=30000, gt=0, description="Request timeout (ms)")

    @field_validator("api_base")
    @classmethod
    def validate_api_base(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        if not v.startswith(("http://", "https://")) or len(v.split("://", 1)[1]) == 0:
            msg = "Invalid CHECKMATE_API_BASE URL"
            raise ValueError(msg)
        return v

    def request_context(self) -> RequestContext:
        """Build the dispatcher's read-only context."""
        return RequestContext(
            base_url=self.api_base,
            token=self.api_token,
            timeout_ms=self.request_timeout,
        )


def _build_settings(data: dict[str, Any], environ: Mapping[str, str]) -> Settings:
    """Overlay environment values on file values and validate the result."""
    merged = dict(data)
    for env_name, key in ENV_VARS.items():
        value = environ.get(env_name)
        if value:
            merged[key] = value

    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        issues = [
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError(issues=issues) from e


def load_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Load settings from an optional YAML file overlaid with environment variables.

    Args:
        path: YAML file with api_base/api_token/log_level/request_timeout keys
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated Settings object

    Raises:
        FileNotFoundError: If path is given and doesn't exist
        ConfigError: If the file isn't valid YAML or the merged values don't
            match the schema
    """
    data: dict[str, Any] = {}
    if path is not None:
        with Path(path).open() as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(issues=[f"{path}: {e}"]) from e
        if not isinstance(data, dict):
            raise ConfigError(issues=[f"{path}: expected a mapping at the top level"])

    return _build_settings(data, os.environ if environ is None else environ)


def load_settings_from_string(content: str, environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from a YAML string; only the given environ is overlaid."""
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigError(issues=[f"settings: {e}"]) from e
    if not isinstance(data, dict):
        raise ConfigError(issues=["settings: expected a mapping at the top level"])
    return _build_settings(data, environ or {})


def dump_json(value: Any) -> str:
    """Pretty-print a payload the way every envelope embeds it."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)
