"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only decides
where records go. Everything is written to stderr because stdout carries the
MCP protocol when the server runs over stdio.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# LOG_LEVEL values -> stdlib levels
LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def configure_logging(level: str = "info") -> None:
    """
    Install a RichHandler on the package logger.

    Calling it again replaces the previous handler, so the CLI can reconfigure
    after loading settings.

    Args:
        level: One of error, warn, info, debug
    """
    logger = logging.getLogger("checkmate_mcp")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(LEVELS.get(level.lower(), logging.INFO))
    logger.propagate = False
