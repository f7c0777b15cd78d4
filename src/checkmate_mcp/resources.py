"""
Read-only resources served next to the tools.

    checkmate://server-info   name, version, API base, uptime
    checkmate://health        whether the API answers an authenticated request
    checkmate://api-docs      markdown overview of the tools and their endpoints
"""

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from checkmate_mcp import __version__
from checkmate_mcp.client import Dispatcher
from checkmate_mcp.errors import CheckmateError, ResourceNotFoundError
from checkmate_mcp.schema import Settings, dump_json
from checkmate_mcp.tools.registry import ToolRegistry

START_TIME = time.monotonic()

HEALTH_CHECK_PATH = "api/v1/orgs"

DOCS_LINKS = (
    "- [Checkmate Documentation](https://checkmate.dreamsportslabs.com/)",
    "- [GitHub Repository](https://github.com/ds-horizon/checkmate)",
)


@dataclass(frozen=True)
class Resource:
    """A resource the server advertises."""

    uri: str
    name: str
    description: str
    mime_type: str


RESOURCES = (
    Resource(
        "checkmate://server-info",
        "server-info",
        "Server name, version, API base URL and uptime",
        "application/json",
    ),
    Resource(
        "checkmate://health",
        "health",
        "Checks that the Checkmate API is reachable with the configured token",
        "application/json",
    ),
    Resource(
        "checkmate://api-docs",
        "api-docs",
        "Overview of the available tools and the endpoints behind them",
        "text/markdown",
    ),
)


def _uptime_ms() -> int:
    return int((time.monotonic() - START_TIME) * 1000)


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def server_info(settings: Settings) -> dict[str, Any]:
    """Describe this server process."""
    return {
        "name": "checkmate-mcp",
        "version": __version__,
        "apiBase": settings.api_base,
        "uptime": _uptime_ms(),
        "timestamp": _timestamp(),
    }


def health_check(dispatcher: Dispatcher) -> dict[str, Any]:
    """
    Call the API once.

    Healthy means the call returned a payload; any failure is reported in
    "error" rather than raised.
    """
    health: dict[str, Any] = {
        "status": "unhealthy",
        "apiReachable": False,
        "timestamp": _timestamp(),
        "uptime": _uptime_ms(),
    }
    try:
        payload = dispatcher.dispatch(HEALTH_CHECK_PATH)
    except CheckmateError as e:
        health["error"] = e.message
        return health

    health["apiReachable"] = payload is not None
    health["status"] = "healthy" if payload is not None else "unhealthy"
    return health


def api_docs(registry: ToolRegistry) -> str:
    """Render the catalogue as markdown."""
    lines = ["# Checkmate API Documentation", "", "## Official Documentation", "", *DOCS_LINKS]
    lines += ["", "## Available Tools", ""]
    for name in registry.list_tools():
        definition = registry.get(name)
        lines.append(f"- `{name}` - `{definition.method} /{definition.path}` - {definition.description}")
    return "\n".join(lines) + "\n"


def read_resource(
    uri: str,
    *,
    settings: Settings,
    dispatcher: Dispatcher,
    registry: ToolRegistry,
) -> tuple[str, str]:
    """
    Read one resource.

    Returns:
        (text, mime_type)

    Raises:
        ResourceNotFoundError: If the URI is not one of RESOURCES
    """
    if uri == "checkmate://server-info":
        return dump_json(server_info(settings)), "application/json"
    if uri == "checkmate://health":
        return dump_json(health_check(dispatcher)), "application/json"
    if uri == "checkmate://api-docs":
        return api_docs(registry), "text/markdown"
    raise ResourceNotFoundError(uri=uri)
