"""
Response normalization.

Every outcome of a tool call ends up here and leaves as a ToolResponse:

    payload           -> handle_api_response()      (success, or backend-reported failure)
    empty payload     -> format_not_found_error()   (detail tools only)
    raised exception  -> error_boundary()           (validation, transport, defects)

The backend often answers "not found" with an empty object or array instead
of a 404, which is why emptiness gets its own predicate.
"""

import functools
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import httpx

from checkmate_mcp.errors import CheckmateError
from checkmate_mcp.schema import ToolResponse, dump_json

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., ToolResponse])

# Cause descriptions for backend-reported statuses
STATUS_MESSAGES = {
    400: "Bad Request - Invalid data provided",
    401: "Unauthorized - Authentication required or invalid token",
    403: "Forbidden - Insufficient permissions",
    404: "Not Found - Resource does not exist",
    409: "Conflict - Resource already exists or state conflict",
    422: "Unprocessable Entity - Validation failed",
    423: "Locked - Resource is locked and cannot be modified",
    500: "Internal Server Error - Please try again",
    503: "Service Unavailable - Server is temporarily unavailable",
}


# =============================================================================
# Emptiness
# =============================================================================


def is_empty_data(value: Any) -> bool:
    """
    True for None, an empty sequence or an empty mapping.

    Falsy scalars (0, False, "") are data, not emptiness.
    """
    if value is None:
        return True
    if isinstance(value, (list, tuple, Mapping)):
        return len(value) == 0
    return False


def is_missing_entity(payload: Any) -> bool:
    """
    Decide whether a detail lookup came back without its entity.

    Besides a plain empty payload, the backend wraps records as {"data": ...};
    an envelope whose data is empty, or a record whose every field is null,
    also means the entity is missing.
    """
    if is_empty_data(payload):
        return True
    if isinstance(payload, Mapping) and "data" in payload:
        data = payload["data"]
        if is_empty_data(data):
            return True
        if isinstance(data, Mapping) and all(v is None for v in data.values()):
            return True
    return False


def format_not_found_error(
    kind: str,
    identifier: Any,
    helper_tool: str | None = None,
) -> ToolResponse:
    """
    Build the soft-failure envelope for a missing entity.

    Example:
        >>> format_not_found_error("Organization", 42, "get-orgs-list").text.splitlines()[0]
        '❌ Organization not found'
    """
    noun = kind.lower()
    lines = [
        f"❌ {kind} not found",
        "",
        f"{kind} {identifier} does not exist or you don't have access to it.",
        "",
        "💡 Solution:",
    ]
    if helper_tool:
        lines.append(f"- Use {helper_tool} to find valid {noun}s")
    lines.append(f"- Verify the {noun} ID is correct")
    lines.append("- Ensure you have access to this resource")
    return ToolResponse.fail("\n".join(lines) + "\n")


# =============================================================================
# Payloads
# =============================================================================


def _reports_failure(data: Any) -> bool:
    if not isinstance(data, Mapping):
        return False
    status = data.get("status")
    if isinstance(status, int) and not isinstance(status, bool) and status >= 400:
        return True
    return bool(data.get("error"))


def extract_api_error(data: Any) -> str:
    """Pull the most specific cause out of a backend-reported failure."""
    if not isinstance(data, Mapping) or not data:
        return "No response received from server"

    error = data.get("error")
    if error:
        return error if isinstance(error, str) else dump_json(error)

    if data.get("message"):
        return str(data["message"])

    if data.get("validationErrors"):
        return f"Validation errors:\n{dump_json(data['validationErrors'])}"

    status = data.get("status")
    if isinstance(status, int) and status >= 400:
        return STATUS_MESSAGES.get(status, f"HTTP Error {status}")

    return "Unknown error occurred"


def format_user_friendly_error(
    operation: str,
    data: Any,
    required_fields: Sequence[str] | None = None,
) -> ToolResponse:
    """
    Explain a backend-reported failure with remediation guidance.

    The guidance depends on the cause: auth, validation, not found, locked or
    conflict. The raw response data is appended when there is any.
    """
    details = extract_api_error(data)
    status = data.get("status") if isinstance(data, Mapping) else None

    lines = [f"❌ Failed to {operation}", "", f"Error: {details}", ""]

    if "Unauthorized" in details or "Authentication" in details:
        lines += [
            "💡 Solution:",
            "- Check that your API token is valid",
            "- Verify the token has not expired",
            "- Ensure you have the necessary permissions",
        ]
    elif "validation" in details.lower() or "Required" in details:
        lines.append("💡 Required Information:")
        if required_fields:
            lines += [f"- {f}" for f in required_fields]
        else:
            lines.append("- Check the API documentation for required fields")
        lines += ["", "Please provide all required fields and try again."]
    elif "not found" in details.lower():
        lines += [
            "💡 Solution:",
            "- Verify the resource ID exists",
            "- Check that you have access to this resource",
            "- Ensure you're using the correct project/organization ID",
        ]
    elif "Locked" in details or status == 423:
        lines += [
            "💡 Solution:",
            "- This resource is locked and cannot be modified",
            "- Unlock the resource first before making changes",
        ]
    elif "Conflict" in details or status == 409:
        lines += [
            "💡 Solution:",
            "- Resource already exists with this name/identifier",
            "- Choose a different name or update the existing resource",
        ]

    if isinstance(data, Mapping) and data:
        lines += ["", "📋 Response Data:", dump_json(data)]

    return ToolResponse.fail("\n".join(lines).rstrip() + "\n")


def handle_api_response(
    data: Any,
    action: str = "complete operation",
    usage_hints: Sequence[str] | None = None,
) -> ToolResponse:
    """
    Wrap a payload in the success envelope.

    The text states what was done, embeds the pretty-printed payload and
    lists the tool's parameters so the caller can adjust the next call.
    A missing payload, or one that itself reports an error, produces the
    user-friendly failure envelope instead.

    Args:
        data: Decoded backend payload
        action: What was done, e.g. "retrieve project 3 details"
        usage_hints: One line per parameter

    Returns:
        ToolResponse (is_error=False on success)
    """
    if data is None:
        return format_user_friendly_error(action, {"error": "No response from server"}, usage_hints)
    if _reports_failure(data):
        return format_user_friendly_error(action, data, usage_hints)

    text = f"✅ Successfully completed: {action}\n\n{dump_json(data)}"
    if usage_hints:
        text += "\n\n📝 Parameters:\n" + "\n".join(f"- {hint}" for hint in usage_hints)
    return ToolResponse.ok(text)


# =============================================================================
# Failure boundary
# =============================================================================


def format_tool_error(failure: str, message: str, tip: str | None = None) -> str:
    """The uniform text of a failed tool call."""
    text = f"❌ Error {failure}: {message}"
    if tip:
        text += f"\n\n💡 Tip: {tip}"
    return text


def error_boundary(failure: str, tip: str | None = None) -> Callable[[F], F]:
    """
    Decorator converting anything raised by the wrapped call into an error envelope.

    Args:
        failure: What was being attempted, e.g. "retrieving project details"
        tip: Remediation hint, usually naming a lookup tool

    Example:
        @error_boundary("retrieving labels", "Use get-projects to find valid project IDs.")
        def run(args, dispatcher):
            ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> ToolResponse:
            try:
                return func(*args, **kwargs)
            except CheckmateError as e:
                logger.warning("Error %s: %s", failure, e.message)
                return ToolResponse.fail(format_tool_error(failure, e.message, tip), error_code=e.code)
            except httpx.HTTPError as e:
                logger.warning("Error %s: %s", failure, e)
                return ToolResponse.fail(format_tool_error(failure, str(e) or type(e).__name__, tip))
            except Exception as e:
                logger.exception("Unexpected error %s", failure)
                message = f"Unknown error: {e}" if str(e) else "Unknown error"
                return ToolResponse.fail(format_tool_error(failure, message, tip))

        return wrapper  # type: ignore[return-value]

    return decorator
