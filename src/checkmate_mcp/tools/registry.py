"""
Tool registry for checkmate-mcp.

The registry is built once from the catalogue and never changes afterwards;
the MCP host and the CLI both consume it.

Design:
    - Built by a pure function (build_registry) from tool groups
    - Registration order doesn't matter; duplicate names are an error
    - Read-only after construction, so concurrent lookups need no locking

Usage:
    from checkmate_mcp.tools.registry import default_registry

    registry = default_registry()
    response = registry.invoke("get-projects", {"orgId": 1}, dispatcher)
"""

from collections.abc import Iterable, Iterator, Mapping
from functools import lru_cache
from itertools import chain
from types import MappingProxyType
from typing import Any

from checkmate_mcp.client import Dispatcher
from checkmate_mcp.errors import DuplicateToolError, ToolNotFoundError
from checkmate_mcp.schema import ToolResponse
from checkmate_mcp.tools.attachments import attachment_tools
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.catalog import catalog_tools
from checkmate_mcp.tools.normalize import format_tool_error
from checkmate_mcp.tools.orgs import org_tools
from checkmate_mcp.tools.projects import project_tools
from checkmate_mcp.tools.runs import run_tools
from checkmate_mcp.tools.testcases import testcase_tools


class ToolRegistry:
    """
    Immutable mapping from tool names to tool definitions.

    Attributes:
        _tools: Read-only view of name -> ToolDefinition
    """

    def __init__(self, definitions: Iterable[ToolDefinition] = ()) -> None:
        """
        Build the registry.

        Raises:
            DuplicateToolError: If two definitions share a name
        """
        tools: dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in tools:
                raise DuplicateToolError(tool=definition.name)
            tools[definition.name] = definition
        self._tools: Mapping[str, ToolDefinition] = MappingProxyType(tools)

    def get(self, name: str) -> ToolDefinition:
        """
        Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool with that name is registered
        """
        definition = self._tools.get(name)
        if definition is None:
            raise ToolNotFoundError(tool=name)
        return definition

    def get_optional(self, name: str) -> ToolDefinition | None:
        """Look up a tool by name, returning None if not found."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def list_tools(self) -> list[str]:
        """List all registered tool names in sorted order."""
        return sorted(self._tools)

    def as_mapping(self) -> Mapping[str, ToolDefinition]:
        """Read-only name -> definition view."""
        return self._tools

    def invoke(
        self,
        name: str,
        arguments: Mapping[str, Any] | None,
        dispatcher: Dispatcher,
    ) -> ToolResponse:
        """
        Invoke a tool by name.

        Unknown names produce an error envelope rather than an exception.
        """
        definition = self._tools.get(name)
        if definition is None:
            error = ToolNotFoundError(tool=name)
            text = format_tool_error(f"calling {name}", error.message, error.suggestion)
            return ToolResponse.fail(text, error_code=error.code)
        return definition.invoke(arguments, dispatcher)

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        """Iterate over all registered definitions."""
        return iter(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        return f"<ToolRegistry: {len(self._tools)} tools>"


def build_registry(*groups: Iterable[ToolDefinition]) -> ToolRegistry:
    """Build a registry from any number of tool groups."""
    return ToolRegistry(chain.from_iterable(groups))


@lru_cache(maxsize=1)
def default_registry() -> ToolRegistry:
    """The full Checkmate catalogue."""
    return build_registry(
        org_tools(),
        project_tools(),
        catalog_tools(),
        testcase_tools(),
        run_tools(),
        attachment_tools(),
    )
