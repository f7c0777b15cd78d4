"""
Tool definitions.

A ToolDefinition is plain data: a name, a description, an ordered parameter
contract and a handler. Handlers receive already-validated arguments and the
dispatcher explicitly; they hold no state of their own.

Invocation pipeline (ToolDefinition.invoke):
    1. validate raw arguments against the contract
    2. run cross-argument checks
    3. call the handler
all inside error_boundary(failure, tip), so every path ends in a ToolResponse.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from checkmate_mcp.client import Dispatcher
from checkmate_mcp.schema import ToolResponse
from checkmate_mcp.tools.normalize import error_boundary
from checkmate_mcp.tools.params import Param
from checkmate_mcp.tools.validation import input_schema, validate_arguments

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any], Dispatcher], ToolResponse]

# A check inspects validated arguments and raises ToolInvalidArgsError
Check = Callable[[dict[str, Any]], None]


@dataclass(frozen=True)
class ToolDefinition:
    """
    One callable tool.

    Attributes:
        name: Unique tool name, e.g. "get-projects"
        description: What the tool does, shown to the calling agent
        params: Ordered parameter contract
        handler: Performs the call given validated args and a dispatcher
        failure: What was being attempted, used in error text
        tip: Remediation hint for failures
        checks: Preconditions across arguments, run before the handler
        method: HTTP method of the backing endpoint
        path: Backing endpoint path
    """

    name: str
    description: str
    params: tuple[Param, ...]
    handler: Handler
    failure: str
    tip: str | None = None
    checks: tuple[Check, ...] = ()
    method: str = "GET"
    path: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Tool must have a non-empty name"
            raise ValueError(msg)
        names = [p.name for p in self.params]
        if len(names) != len(set(names)):
            msg = f"Tool {self.name} declares a parameter twice"
            raise ValueError(msg)

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema of the parameter contract."""
        return input_schema(self.params)

    @property
    def usage_hints(self) -> list[str]:
        """One line per parameter, e.g. "orgId (number, required): Organization ID"."""
        return [p.usage_hint() for p in self.params]

    def invoke(self, arguments: Mapping[str, Any] | None, dispatcher: Dispatcher) -> ToolResponse:
        """
        Validate, check and run the tool.

        Never raises: failures come back as is_error envelopes.
        """
        return error_boundary(self.failure, self.tip)(self._run)(arguments, dispatcher)

    def _run(self, arguments: Mapping[str, Any] | None, dispatcher: Dispatcher) -> ToolResponse:
        args = validate_arguments(self.params, arguments, tool=self.name)
        for check in self.checks:
            check(args)
        logger.debug("Calling %s with %s", self.name, sorted(args))
        return self.handler(args, dispatcher)

    def __repr__(self) -> str:
        return f"<ToolDefinition {self.name} {self.method} {self.path}>"
