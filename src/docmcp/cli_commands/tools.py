"""``docmcp tools`` — list and invoke the server's tools locally."""

from __future__ import annotations

import json
import sys

import click

from docmcp.cli_commands._app import build_app_or_exit, config_option
from docmcp.cli_commands._output import console, print_tool_result, print_tools_table


@click.group()
def tools() -> None:
    """List and invoke tools."""


@tools.command("list")
@config_option
def list_tools(config_path: str | None) -> None:
    """Show every tool with its description and required arguments."""
    app = build_app_or_exit(config_path)
    print_tools_table(app.catalog.list_tools())


@tools.command("call")
@click.argument("name")
@click.option(
    "--arg",
    "-a",
    "pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Tool argument; VALUE is parsed as JSON when possible.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw result JSON.")
@config_option
def call(name: str, pairs: tuple[str, ...], as_json: bool, config_path: str | None) -> None:
    """Invoke tool NAME through the dispatcher and print its result."""
    from docmcp.protocol.models import ToolResult

    arguments = _parse_pairs(pairs)
    app = build_app_or_exit(config_path)
    response = app.dispatcher.dispatch(
        {
            "jsonrpc": "2.0",
            "id": "cli",
            "method": "tools/call",
            "params": {"name": name, "arguments": arguments},
        }
    )
    if response.error is not None:
        console.print(f"[red]Error {response.error.code}:[/red] {response.error.message}")
        sys.exit(1)

    result = ToolResult.model_validate(response.result)
    print_tool_result(result, as_json=as_json)
    if result.is_error:
        sys.exit(1)


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, object]:
    arguments: dict[str, object] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            msg = f"expected KEY=VALUE, got {pair!r}"
            raise click.BadParameter(msg, param_hint="--arg")
        try:
            arguments[key] = json.loads(raw)
        except json.JSONDecodeError:
            arguments[key] = raw
    return arguments
