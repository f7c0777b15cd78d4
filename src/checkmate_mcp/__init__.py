"""
checkmate-mcp - Model Context Protocol tools for the Checkmate test-management API.

Every tool validates its arguments against a declared contract, issues exactly
one authenticated HTTP call, and returns a uniform response envelope, whether
the call succeeded, found nothing, or failed.

Example usage:
    $ checkmate-mcp serve
    $ checkmate-mcp tools
    $ checkmate-mcp call get-projects --args '{"orgId": 1}'
"""

__version__ = "0.1.0"
__author__ = "Checkmate MCP Contributors"

__all__ = [
    "__version__",
    "__author__",
]
