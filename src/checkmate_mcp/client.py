"""
Request dispatcher for the Checkmate API.

A dispatcher turns (relative path, method, body) into exactly one
authenticated HTTP call and hands back the decoded JSON payload. Tool
handlers only ever see the Dispatcher protocol, so tests can substitute a
recording fake and the MCP host can share one HttpDispatcher across
concurrent calls.

Outcome mapping:
    - 2xx with a JSON body   -> decoded value
    - 204 / empty body       -> None
    - 404                    -> None (the backend's "not found")
    - any other non-2xx      -> ApiError
    - undecodable 2xx body   -> MalformedResponseError
    - timeout                -> RequestTimeoutError
    - connection failure     -> NetworkError

Nothing is retried.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from checkmate_mcp import __version__
from checkmate_mcp.errors import (
    ApiError,
    MalformedResponseError,
    NetworkError,
    RequestTimeoutError,
)
from checkmate_mcp.schema import RequestContext

logger = logging.getLogger(__name__)

USER_AGENT = f"checkmate-mcp/{__version__}"


class Dispatcher(Protocol):
    """Anything that can perform one API call for a tool handler."""

    def dispatch(self, path: str, *, method: str = "GET", body: Any = None) -> Any | None:
        """
        Perform one request.

        Args:
            path: Path relative to the API base, query string included
            method: HTTP method
            body: JSON-serializable body (never with GET)

        Returns:
            Decoded JSON payload, or None when the backend had nothing
        """
        ...


def build_path(path: str, query: Mapping[str, Any] | None = None) -> str:
    """
    Append a query string to a relative path.

    Keys keep the mapping's order and None values are skipped, so the same
    arguments always produce the same URL. Booleans render as true/false.

    Example:
        >>> build_path("api/v1/projects", {"orgId": 1, "page": None, "textSearch": "login"})
        'api/v1/projects?orgId=1&textSearch=login'
    """
    if not query:
        return path
    params = httpx.QueryParams({k: v for k, v in query.items() if v is not None})
    return f"{path}?{params}" if params else path


class HttpDispatcher:
    """
    Dispatcher backed by a single shared httpx.Client.

    The client carries the base URL, bearer token and timeout from the
    RequestContext; nothing about it changes after construction.

    Example:
        with HttpDispatcher(settings.request_context()) as dispatcher:
            orgs = dispatcher.dispatch("api/v1/orgs")
    """

    def __init__(
        self,
        context: RequestContext,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            context: Base URL, token and timeout
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.context = context
        self._client = httpx.Client(
            base_url=context.base_url,
            headers={
                "Authorization": f"Bearer {context.token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=context.timeout_ms / 1000,
            transport=transport,
        )

    def dispatch(self, path: str, *, method: str = "GET", body: Any = None) -> Any | None:
        """
        Perform one request against the API.

        Raises:
            ValueError: If a body is passed with GET
            ApiError: Non-2xx response other than 404
            MalformedResponseError: 2xx response whose body is not JSON
            RequestTimeoutError: The transport timed out
            NetworkError: No response was received
        """
        method = method.upper()
        if method == "GET" and body is not None:
            msg = "GET requests cannot carry a body"
            raise ValueError(msg)

        logger.debug("%s %s", method, path)
        try:
            response = self._client.request(method, path, json=body)
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out after %dms", method, path, self.context.timeout_ms)
            raise RequestTimeoutError(
                method=method, path=path, timeout_ms=self.context.timeout_ms
            ) from e
        except httpx.RequestError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise NetworkError(
                method=method, path=path, underlying_error=str(e) or type(e).__name__
            ) from e

        logger.debug("%s %s -> %d", method, path, response.status_code)

        if response.status_code == 404:
            return None

        if not response.is_success:
            logger.error("%s %s returned HTTP %d", method, path, response.status_code)
            raise ApiError(
                method=method,
                path=path,
                status_code=response.status_code,
                response_body=_error_body(response),
            )

        if response.status_code == 204 or not response.content.strip():
            return None

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                method=method,
                path=path,
                status_code=response.status_code,
                underlying_error=str(e),
            ) from e

    def close(self) -> None:
        """Release the connection pool."""
        self._client.close()

    def __enter__(self) -> "HttpDispatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<HttpDispatcher {self.context.base_url}>"


def _error_body(response: httpx.Response) -> Any:
    """Best-effort decode of an error response body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
