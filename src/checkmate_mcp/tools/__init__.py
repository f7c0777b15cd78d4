"""
Tools module for checkmate-mcp.

Every tool maps one call onto one Checkmate API endpoint.

Architecture:
    - Param: one declared argument; a tuple of them is a tool's contract
    - ToolDefinition: name, description, contract and handler
    - api_tool: declares an endpoint-backed tool without writing a handler
    - ToolRegistry: immutable name -> definition mapping built from the catalogue

Catalogue modules (each exposes one pure *_tools() function):
    orgs, projects, catalog, testcases, runs, attachments
"""

from checkmate_mcp.tools.api import NotFound, api_tool
from checkmate_mcp.tools.base import ToolDefinition
from checkmate_mcp.tools.params import Param, ParamKind
from checkmate_mcp.tools.registry import ToolRegistry, build_registry, default_registry

__all__ = [
    "NotFound",
    "Param",
    "ParamKind",
    "ToolDefinition",
    "ToolRegistry",
    "api_tool",
    "build_registry",
    "default_registry",
]
