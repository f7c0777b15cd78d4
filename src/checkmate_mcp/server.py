"""
MCP host.

Exposes a ToolRegistry and the read-only resources over the Model Context
Protocol. The host does no argument validation of its own: arguments reach
ToolDefinition.invoke untouched so the contract's validator produces the
error text. Tool calls are blocking (one HTTP request each) and run in
worker threads so concurrent calls don't stall the event loop.
"""

import logging
from typing import Any

from anyio import to_thread
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from checkmate_mcp import __version__
from checkmate_mcp.client import Dispatcher
from checkmate_mcp.resources import RESOURCES, read_resource
from checkmate_mcp.schema import (
    ImageContent,
    ResourceContent,
    Settings,
    TextContent,
    ToolResponse,
)
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "checkmate-mcp"


# =============================================================================
# Conversion
# =============================================================================


def to_mcp_tool(definition: ToolDefinition) -> types.Tool:
    """Describe a tool for tools/list."""
    return types.Tool(
        name=definition.name,
        description=definition.description,
        inputSchema=definition.input_schema,
    )


def to_mcp_content(
    block: TextContent | ImageContent | ResourceContent,
) -> types.TextContent | types.ImageContent | types.EmbeddedResource:
    """Convert one content block; every variant must be handled here."""
    if isinstance(block, TextContent):
        return types.TextContent(type="text", text=block.text)
    if isinstance(block, ImageContent):
        return types.ImageContent(type="image", data=block.data, mimeType=block.mime_type)
    if isinstance(block, ResourceContent):
        return types.EmbeddedResource(
            type="resource",
            resource=types.TextResourceContents(
                uri=AnyUrl(block.resource.uri),
                mimeType=block.resource.mime_type,
                text=block.resource.text,
            ),
        )
    raise TypeError(f"Unsupported content block: {type(block).__name__}")


def to_call_tool_result(response: ToolResponse) -> types.CallToolResult:
    """Convert an envelope into the MCP tools/call result."""
    return types.CallToolResult(
        content=[to_mcp_content(block) for block in response.content],
        isError=response.is_error,
        _meta=response.meta,
    )


# =============================================================================
# Server
# =============================================================================


def build_server(
    registry: ToolRegistry,
    dispatcher: Dispatcher,
    settings: Settings,
) -> Server:
    """
    Build the low-level MCP server.

    Args:
        registry: Tools to expose
        dispatcher: Shared dispatcher every call goes through
        settings: Loaded settings (used by the server-info resource)

    Returns:
        An mcp Server ready to run on any transport
    """
    server: Server = Server(SERVER_NAME, version=__version__)
    tools = [to_mcp_tool(definition) for definition in registry]

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return tools

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        logger.info("Tool call: %s", name)
        response = await to_thread.run_sync(registry.invoke, name, arguments, dispatcher)
        if response.is_error:
            logger.info("Tool %s returned an error", name)
        return to_call_tool_result(response)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [
            types.Resource(
                uri=AnyUrl(resource.uri),
                name=resource.name,
                description=resource.description,
                mimeType=resource.mime_type,
            )
            for resource in RESOURCES
        ]

    @server.read_resource()
    async def read(uri: AnyUrl) -> list[ReadResourceContents]:
        text, mime_type = await to_thread.run_sync(
            lambda: read_resource(
                str(uri).rstrip("/"),
                settings=settings,
                dispatcher=dispatcher,
                registry=registry,
            )
        )
        return [ReadResourceContents(content=text, mime_type=mime_type)]

    return server


async def serve_stdio(server: Server) -> None:
    """Run a server over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("%s %s listening on stdio", SERVER_NAME, __version__)
        await server.run(read_stream, write_stream, server.create_initialization_options())
