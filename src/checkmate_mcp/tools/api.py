"""
Endpoint-backed tools.

Almost every tool is "validate, call one endpoint, normalize", so the
catalogue declares tools through api_tool() instead of writing handlers:

    api_tool(
        "get-labels", "Get labels for a project",
        "GET", "api/v1/labels", (PROJECT_ID,),
        action="retrieve labels for project {projectId}",
        failure="retrieving labels",
        tip="Use get-projects to find valid project IDs.",
    )

GET tools send their arguments as the query string (declared order);
every other method sends them as the JSON body.
"""

from collections.abc import Callable
from typing import Any, NamedTuple

from checkmate_mcp.client import Dispatcher, build_path
from checkmate_mcp.schema import ToolResponse
from checkmate_mcp.tools.base import Check, ToolDefinition
from checkmate_mcp.tools.normalize import (
    format_not_found_error,
    handle_api_response,
    is_missing_entity,
)
from checkmate_mcp.tools.params import Param

# A template formatted with the validated args, or a function of them
Action = str | Callable[[dict[str, Any]], str]

# Custom payload rendering; returning None falls back to handle_api_response
Renderer = Callable[[Any, dict[str, Any]], ToolResponse | None]


class NotFound(NamedTuple):
    """How a detail tool reports a missing entity."""

    kind: str
    id_param: str
    helper_tool: str


def describe(action: Action, args: dict[str, Any]) -> str:
    """Render the action statement for a call."""
    if callable(action):
        return action(args)
    return action.format(**args)


def api_tool(
    name: str,
    description: str,
    method: str,
    path: str,
    params: tuple[Param, ...] = (),
    *,
    action: Action,
    failure: str,
    tip: str | None = None,
    not_found: NotFound | None = None,
    checks: tuple[Check, ...] = (),
    render: Renderer | None = None,
) -> ToolDefinition:
    """
    Declare a tool backed by a single endpoint.

    Args:
        name: Tool name
        description: Tool description
        method: HTTP method
        path: Endpoint path relative to the API base
        params: Ordered parameter contract
        action: Statement of what a successful call did
        failure: What was being attempted, for error text
        tip: Remediation hint for failures
        not_found: Treat an empty payload as a missing entity
        checks: Cross-argument preconditions
        render: Custom rendering for recognised payload shapes

    Returns:
        A ToolDefinition whose handler performs exactly one dispatch
    """
    method = method.upper()
    hints = [p.usage_hint() for p in params]

    def handler(args: dict[str, Any], dispatcher: Dispatcher) -> ToolResponse:
        if method == "GET":
            payload = dispatcher.dispatch(build_path(path, args))
        else:
            payload = dispatcher.dispatch(path, method=method, body=args)

        if not_found is not None and is_missing_entity(payload):
            return format_not_found_error(
                not_found.kind, args[not_found.id_param], not_found.helper_tool
            )
        if render is not None:
            rendered = render(payload, args)
            if rendered is not None:
                return rendered
        return handle_api_response(payload, describe(action, args), hints)

    return ToolDefinition(
        name=name,
        description=description,
        params=params,
        handler=handler,
        failure=failure,
        tip=tip,
        checks=checks,
        method=method,
        path=path,
    )
