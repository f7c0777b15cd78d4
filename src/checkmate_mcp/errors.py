"""
Exception hierarchy for checkmate-mcp.

All checkmate-mcp exceptions inherit from CheckmateError, allowing callers to
catch every adapter-specific failure with a single except clause.

Exception Categories:
    - ConfigError: Settings could not be loaded or validated
    - ToolError: Tool lookup, registration or argument validation failed
    - TransportError: The backend call itself failed (HTTP, network, payload)
    - ResourceNotFoundError: An unknown MCP resource URI was requested

Tool handlers never let these escape: the error boundary in
checkmate_mcp.tools.normalize turns them into isError envelopes. They do
propagate out of the dispatcher, the registry constructor and the config
loader, where the caller decides what to do.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Configuration errors: 1xxx
ERROR_CONFIG_INVALID = 1001

# Tool errors: 2xxx
ERROR_TOOL_NOT_FOUND = 2001
ERROR_TOOL_INVALID_ARGS = 2002
ERROR_TOOL_DUPLICATE = 2003

# Transport errors: 3xxx
ERROR_API_STATUS = 3001
ERROR_API_NETWORK = 3002
ERROR_API_TIMEOUT = 3003
ERROR_API_MALFORMED = 3004

# Resource errors: 4xxx
ERROR_RESOURCE_NOT_FOUND = 4001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class CheckmateError(Exception):
    """
    Base exception for all checkmate-mcp errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Configuration Errors
# =============================================================================


@dataclass
class ConfigError(CheckmateError):
    """
    Raised when settings are missing or invalid.

    Attributes:
        issues: One "key: problem" line per offending setting
    """

    issues: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "Invalid configuration: " + "; ".join(self.issues)
        if self.code == 0:
            self.code = ERROR_CONFIG_INVALID
        if not self.suggestion:
            self.suggestion = "Set CHECKMATE_API_BASE and CHECKMATE_API_TOKEN or pass --config"
        self.context["issues"] = self.issues


# =============================================================================
# Tool Errors
# =============================================================================


@dataclass
class ToolError(CheckmateError):
    """
    Base class for tool errors.

    Attributes:
        tool: Name of the tool involved
    """

    tool: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context["tool"] = self.tool


@dataclass
class ToolNotFoundError(ToolError):
    """Raised when a tool is not registered."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Tool not found: {self.tool}"
        if self.code == 0:
            self.code = ERROR_TOOL_NOT_FOUND
        if not self.suggestion:
            self.suggestion = "Check tool name spelling or list the available tools"
        super().__post_init__()


@dataclass
class DuplicateToolError(ToolError):
    """Raised when two definitions declare the same name."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Tool registered twice: {self.tool}"
        if self.code == 0:
            self.code = ERROR_TOOL_DUPLICATE
        super().__post_init__()


@dataclass
class ToolInvalidArgsError(ToolError):
    """
    Raised when tool arguments fail the parameter contract.

    Attributes:
        argument: Dotted path of the first offending argument
        reason: Why that argument was rejected
        issues: Every "argument: reason" pair found
    """

    argument: str = ""
    reason: str = ""
    issues: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid arguments: '{self.argument}' {self.reason}"
            extra = len(self.issues) - 1
            if extra > 0:
                self.message += f" (and {extra} more issue(s): {'; '.join(self.issues[1:])})"
        if self.code == 0:
            self.code = ERROR_TOOL_INVALID_ARGS
        super().__post_init__()
        self.context.update({
            "argument": self.argument,
            "reason": self.reason,
            "issues": self.issues,
        })


# =============================================================================
# Transport Errors
# =============================================================================


@dataclass
class TransportError(CheckmateError):
    """
    Base class for failed backend calls.

    Attributes:
        method: HTTP method of the failed request
        path: Request path relative to the API base
    """

    method: str = ""
    path: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context.update({
            "method": self.method,
            "path": self.path,
        })


@dataclass
class ApiError(TransportError):
    """
    Raised for a non-2xx response outside the not-found convention.

    Attributes:
        status_code: HTTP status returned by the backend
        response_body: Parsed JSON error body, if the backend sent one
    """

    status_code: int = 0
    response_body: Any = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"HTTP error! status: {self.status_code}"
        if self.code == 0:
            self.code = ERROR_API_STATUS
        super().__post_init__()
        self.context.update({
            "status_code": self.status_code,
            "response_body": self.response_body,
        })


@dataclass
class NetworkError(TransportError):
    """Raised when the request never produced a response."""

    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Network request failed: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_API_NETWORK
        if not self.suggestion:
            self.suggestion = "Check that CHECKMATE_API_BASE points at a running server"
        super().__post_init__()
        self.context["underlying_error"] = self.underlying_error


@dataclass
class RequestTimeoutError(TransportError):
    """Raised when the transport gives up waiting for the backend."""

    timeout_ms: int = 0

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Request timeout after {self.timeout_ms}ms"
        if self.code == 0:
            self.code = ERROR_API_TIMEOUT
        if not self.suggestion:
            self.suggestion = "Increase REQUEST_TIMEOUT or check backend health"
        super().__post_init__()
        self.context["timeout_ms"] = self.timeout_ms


@dataclass
class MalformedResponseError(TransportError):
    """Raised when a 2xx response body is not valid JSON."""

    status_code: int = 0
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Malformed JSON payload (status {self.status_code}): {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_API_MALFORMED
        super().__post_init__()
        self.context.update({
            "status_code": self.status_code,
            "underlying_error": self.underlying_error,
        })


# =============================================================================
# Resource Errors
# =============================================================================


@dataclass
class ResourceNotFoundError(CheckmateError):
    """Raised when an unknown resource URI is read."""

    uri: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Unknown resource: {self.uri}"
        if self.code == 0:
            self.code = ERROR_RESOURCE_NOT_FOUND
        self.context["uri"] = self.uri
