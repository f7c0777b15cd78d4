"""
CLI entry point for checkmate-mcp.

Commands:
    serve       Run the MCP server on stdio
    tools       List the tool catalogue
    call        Invoke a single tool and print its response
    doctor      Check configuration and API reachability

Architecture Note:
    The CLI is thin: it loads settings, builds the registry and dispatcher,
    and hands off to checkmate_mcp.server or ToolRegistry.invoke.
"""

import json
import sys
import traceback
from pathlib import Path
from typing import Annotated, Any, Optional

import anyio
import typer
from rich.console import Console
from rich.table import Table

from checkmate_mcp import __version__
from checkmate_mcp.client import HttpDispatcher
from checkmate_mcp.errors import CheckmateError, ConfigError
from checkmate_mcp.log import configure_logging
from checkmate_mcp.resources import health_check
from checkmate_mcp.schema import (
    ImageContent,
    ResourceContent,
    Settings,
    TextContent,
    ToolResponse,
    load_settings,
)
from checkmate_mcp.server import build_server, serve_stdio
from checkmate_mcp.tools.registry import default_registry

app = typer.Typer(
    name="checkmate-mcp",
    help="Expose the Checkmate test-management API as MCP tools.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="YAML settings file. Environment variables override its values.",
        exists=True,
        readable=True,
        resolve_path=True,
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output results in JSON format.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Enable debug logging and full error tracebacks.")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]checkmate-mcp[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    checkmate-mcp - Checkmate API tools for MCP clients.

    Every tool validates its arguments, makes one authenticated API call and
    returns a uniform response envelope.
    """
    pass


def _output_json_error(error_type: str, message: str, include_traceback: bool = False) -> None:
    """Print an error as JSON."""
    output: dict[str, Any] = {"error": error_type, "message": message}
    if include_traceback:
        output["traceback"] = traceback.format_exc()
    print(json.dumps(output, indent=2))


def _load(config: Path | None, json_output: bool, debug: bool) -> Settings:
    """Load settings or exit with a readable error."""
    try:
        return load_settings(config)
    except ConfigError as e:
        if json_output:
            _output_json_error("config_error", e.message, debug)
        else:
            console.print(f"[red]Configuration error:[/red] {e.message}")
            for issue in e.issues:
                console.print(f"  [dim]•[/dim] {issue}")
            if e.suggestion:
                console.print(f"[yellow]Suggestion:[/yellow] {e.suggestion}")
        raise typer.Exit(code=1)


@app.command()
def serve(
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """
    Run the MCP server on stdio.

    Logs go to stderr; stdout carries the protocol.

    Example:
        $ CHECKMATE_API_BASE=http://localhost:3000 CHECKMATE_API_TOKEN=... checkmate-mcp serve
    """
    settings = _load(config, json_output=False, debug=debug)
    configure_logging("debug" if debug else settings.log_level)

    registry = default_registry()
    with HttpDispatcher(settings.request_context()) as dispatcher:
        server = build_server(registry, dispatcher, settings)
        try:
            anyio.run(serve_stdio, server)
        except KeyboardInterrupt:
            pass


@app.command("tools")
def list_tools(
    json_output: JsonOption = False,
) -> None:
    """
    List the tool catalogue.

    Example:
        $ checkmate-mcp tools --json
    """
    registry = default_registry()

    if json_output:
        output = [
            {
                "name": definition.name,
                "method": definition.method,
                "path": definition.path,
                "description": definition.description,
                "inputSchema": definition.input_schema,
            }
            for definition in sorted(registry, key=lambda d: d.name)
        ]
        print(json.dumps(output, indent=2))
        return

    table = Table(title=f"Checkmate tools ({len(registry)})")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Method")
    table.add_column("Path")
    table.add_column("Description")
    for name in registry.list_tools():
        definition = registry.get(name)
        table.add_row(name, definition.method, definition.path, definition.description)
    console.print(table)


def _render_block(block: TextContent | ImageContent | ResourceContent) -> str:
    if isinstance(block, TextContent):
        return block.text
    if isinstance(block, ImageContent):
        return f"<image {block.mime_type}, {len(block.data)} base64 chars>"
    if isinstance(block, ResourceContent):
        return f"<resource {block.resource.uri}>\n{block.resource.text}"
    raise TypeError(f"Unsupported content block: {type(block).__name__}")


def _display_response(response: ToolResponse) -> None:
    style = "red" if response.is_error else None
    for block in response.content:
        console.print(_render_block(block), markup=False, highlight=False, soft_wrap=True, style=style)


@app.command()
def call(
    tool: Annotated[str, typer.Argument(help="Tool name, e.g. get-projects.")],
    args: Annotated[
        str,
        typer.Option("--args", "-a", help="Tool arguments as a JSON object."),
    ] = "{}",
    config: ConfigOption = None,
    json_output: JsonOption = False,
    debug: DebugOption = False,
) -> None:
    """
    Invoke one tool and print its response.

    Exits with code 1 when the response is an error.

    Example:
        $ checkmate-mcp call get-project-detail --args '{"projectId": 3}'
    """
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        if json_output:
            _output_json_error("invalid_arguments", f"--args is not valid JSON: {e}")
        else:
            console.print(f"[red]--args is not valid JSON:[/red] {e}")
        raise typer.Exit(code=1)

    settings = _load(config, json_output, debug)
    configure_logging("debug" if debug else settings.log_level)

    try:
        with HttpDispatcher(settings.request_context()) as dispatcher:
            response = default_registry().invoke(tool, arguments, dispatcher)
    except Exception as e:
        if json_output:
            _output_json_error("execution_error", str(e), debug)
        else:
            console.print(f"[red]Execution error: {e}[/red]")
            if debug:
                console.print(f"[dim]{traceback.format_exc()}[/dim]")
        raise typer.Exit(code=1)

    if json_output:
        print(json.dumps(response.to_wire(), indent=2, ensure_ascii=False))
    else:
        _display_response(response)

    raise typer.Exit(code=1 if response.is_error else 0)


@app.command()
def doctor(
    config: ConfigOption = None,
    json_output: JsonOption = False,
) -> None:
    """
    Check configuration and API reachability.

    Verifies:
    - Python version (3.11+)
    - Settings load and validate
    - The API answers an authenticated request
    - The tool catalogue builds

    Example:
        $ checkmate-mcp doctor
    """
    checks = []
    all_ok = True

    # Check 1: Python version
    py_version = sys.version_info
    py_version_str = f"{py_version.major}.{py_version.minor}.{py_version.micro}"
    py_ok = py_version >= (3, 11)
    checks.append({
        "name": "Python version",
        "ok": py_ok,
        "value": py_version_str,
        "message": "OK" if py_ok else "Requires Python 3.11+",
    })
    all_ok = all_ok and py_ok

    # Check 2: Settings
    settings: Settings | None = None
    try:
        settings = load_settings(config)
        checks.append({
            "name": "Configuration",
            "ok": True,
            "value": settings.api_base,
            "message": f"timeout {settings.request_timeout}ms, log level {settings.log_level}",
        })
    except ConfigError as e:
        all_ok = False
        checks.append({
            "name": "Configuration",
            "ok": False,
            "value": str(config) if config else "environment",
            "message": "; ".join(e.issues) or e.message,
        })

    # Check 3: API reachability (needs settings)
    if settings is not None:
        with HttpDispatcher(settings.request_context()) as dispatcher:
            health = health_check(dispatcher)
        api_ok = health["status"] == "healthy"
        checks.append({
            "name": "Checkmate API",
            "ok": api_ok,
            "value": settings.api_base,
            "message": "Reachable" if api_ok else health.get("error", "No data returned"),
        })
        all_ok = all_ok and api_ok

    # Check 4: Tool catalogue
    try:
        registry = default_registry()
        checks.append({
            "name": "Tool catalogue",
            "ok": True,
            "value": f"{len(registry)} tools",
            "message": "OK",
        })
    except CheckmateError as e:
        all_ok = False
        checks.append({
            "name": "Tool catalogue",
            "ok": False,
            "value": "",
            "message": e.message,
        })

    if json_output:
        output = {
            "ok": all_ok,
            "version": __version__,
            "checks": checks,
        }
        print(json.dumps(output, indent=2))
    else:
        console.print(f"[bold]checkmate-mcp doctor[/bold] v{__version__}")
        console.print()

        for check in checks:
            icon = "[green]✓[/green]" if check["ok"] else "[red]✗[/red]"
            if check["ok"]:
                console.print(f"{icon} {check['name']}: [dim]{check['value']}[/dim] - {check['message']}")
            else:
                console.print(f"{icon} {check['name']}: [dim]{check['value']}[/dim]")
                console.print(f"    [red]{check['message']}[/red]")

        console.print()
        if all_ok:
            console.print("[green]All checks passed![/green]")
        else:
            console.print("[yellow]Some checks failed. See above for details.[/yellow]")

    raise typer.Exit(code=0 if all_ok else 1)


if __name__ == "__main__":
    app()
