"""
Unit tests for the tool registry and tool definitions.

Tests cover:
- Registration and lookup
- Duplicate detection
- Invoking unknown tools
- ToolDefinition construction rules
"""

from typing import Any

import pytest

from checkmate_mcp.errors import ERROR_TOOL_NOT_FOUND, DuplicateToolError, ToolNotFoundError
from checkmate_mcp.schema import ToolResponse
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import ORG_ID, PROJECT_ID
from checkmate_mcp.tools.registry import ToolRegistry, build_registry, default_registry


def echo(args: dict[str, Any], dispatcher: Any) -> ToolResponse:
    return ToolResponse.ok(f"echo {args}")


def make_tool(name: str, **kwargs: Any) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=f"The {name} tool",
        params=kwargs.pop("params", ()),
        handler=kwargs.pop("handler", echo),
        failure=kwargs.pop("failure", f"running {name}"),
        **kwargs,
    )


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_empty_registry(self) -> None:
        """New registry has no tools."""
        registry = ToolRegistry()
        assert len(registry) == 0
        assert registry.list_tools() == []

    def test_register_and_get(self) -> None:
        """Registered tools can be looked up by name."""
        tool = make_tool("get-things")
        registry = ToolRegistry([tool])
        assert registry.get("get-things") is tool
        assert registry.has("get-things")
        assert "get-things" in registry

    def test_get_missing_raises(self) -> None:
        """Looking up an unknown tool raises."""
        with pytest.raises(ToolNotFoundError) as exc_info:
            ToolRegistry().get("nope")
        assert exc_info.value.tool == "nope"

    def test_get_optional(self) -> None:
        """get_optional returns None for unknown tools."""
        assert ToolRegistry().get_optional("nope") is None

    def test_duplicate_rejected(self) -> None:
        """Two tools with one name is an error."""
        with pytest.raises(DuplicateToolError) as exc_info:
            ToolRegistry([make_tool("a"), make_tool("a")])
        assert exc_info.value.tool == "a"

    def test_list_is_sorted(self) -> None:
        """list_tools is sorted regardless of registration order."""
        registry = ToolRegistry([make_tool("b"), make_tool("a"), make_tool("c")])
        assert registry.list_tools() == ["a", "b", "c"]

    def test_mapping_is_read_only(self) -> None:
        """The exposed mapping cannot be mutated."""
        registry = ToolRegistry([make_tool("a")])
        with pytest.raises(TypeError):
            registry.as_mapping()["b"] = make_tool("b")  # type: ignore[index]

    def test_iteration_yields_definitions(self) -> None:
        """Iterating gives definitions."""
        registry = ToolRegistry([make_tool("a")])
        assert [d.name for d in registry] == ["a"]

    def test_build_registry_from_groups(self) -> None:
        """Groups are concatenated."""
        registry = build_registry((make_tool("a"),), (make_tool("b"), make_tool("c")))
        assert len(registry) == 3

    def test_build_registry_detects_cross_group_duplicates(self) -> None:
        """Duplicates across groups are still duplicates."""
        with pytest.raises(DuplicateToolError):
            build_registry((make_tool("a"),), (make_tool("a"),))

    def test_default_registry_is_cached(self) -> None:
        """The catalogue is built once."""
        assert default_registry() is default_registry()

    def test_repr(self) -> None:
        """Repr shows the tool count."""
        assert repr(ToolRegistry([make_tool("a")])) == "<ToolRegistry: 1 tools>"


class TestInvoke:
    """Tests for ToolRegistry.invoke."""

    def test_invoke_known(self, dispatcher: Any) -> None:
        """Known tools run their handler."""
        registry = ToolRegistry([make_tool("a")])
        response = registry.invoke("a", {}, dispatcher)
        assert response.is_error is False
        assert response.text == "echo {}"

    def test_invoke_unknown_is_error_envelope(self, dispatcher: Any) -> None:
        """Unknown tools give an error envelope, not an exception."""
        response = ToolRegistry().invoke("get-everything", {}, dispatcher)
        assert response.is_error is True
        assert response.text.startswith(
            "❌ Error calling get-everything: Tool not found: get-everything\n\n💡 Tip: "
        )
        assert response.meta == {"error_code": ERROR_TOOL_NOT_FOUND}
        assert dispatcher.calls == []


class TestToolDefinition:
    """Tests for ToolDefinition."""

    def test_empty_name_rejected(self) -> None:
        """Tools need a name."""
        with pytest.raises(ValueError):
            make_tool("")

    def test_duplicate_param_rejected(self) -> None:
        """A parameter can be declared only once."""
        with pytest.raises(ValueError):
            make_tool("a", params=(ORG_ID, ORG_ID))

    def test_input_schema(self) -> None:
        """input_schema reflects the params."""
        tool = make_tool("a", params=(ORG_ID, PROJECT_ID))
        assert tool.input_schema["required"] == ["orgId", "projectId"]

    def test_usage_hints(self) -> None:
        """One hint line per parameter."""
        tool = make_tool("a", params=(ORG_ID,))
        assert tool.usage_hints == [ORG_ID.usage_hint()]
        assert tool.usage_hints[0].startswith("orgId (number, required)")

    def test_invalid_arguments_skip_handler(self, dispatcher: Any) -> None:
        """The handler doesn't run when validation fails."""
        seen: list[dict[str, Any]] = []

        def handler(args: dict[str, Any], d: Any) -> ToolResponse:
            seen.append(args)
            return ToolResponse.ok("ran")

        tool = make_tool("a", params=(ORG_ID,), handler=handler, failure="doing a")
        response = tool.invoke({"orgId": "one"}, dispatcher)
        assert response.is_error is True
        assert response.text.startswith("❌ Error doing a: Invalid arguments: 'orgId'")
        assert seen == []

    def test_checks_run_before_handler(self, dispatcher: Any) -> None:
        """Checks can veto a call."""

        def veto(args: dict[str, Any]) -> None:
            raise ValueError("vetoed")

        tool = make_tool("a", checks=(veto,), failure="doing a")
        response = tool.invoke({}, dispatcher)
        assert response.is_error is True
        assert response.text == "❌ Error doing a: Unknown error: vetoed"

    def test_handler_exception_becomes_envelope(self, dispatcher: Any) -> None:
        """Handler exceptions never escape invoke()."""

        def boom(args: dict[str, Any], d: Any) -> ToolResponse:
            raise RuntimeError("kaput")

        response = make_tool("a", handler=boom, failure="doing a", tip="Try later.").invoke({}, dispatcher)
        assert response.is_error is True
        assert response.text == "❌ Error doing a: Unknown error: kaput\n\n💡 Tip: Try later."
