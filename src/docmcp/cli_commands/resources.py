"""``docmcp resources`` — list and read resources."""

from __future__ import annotations

import sys

import click

from docmcp.cli_commands._app import build_app_or_exit, config_option
from docmcp.cli_commands._output import console, print_resources_table


@click.group()
def resources() -> None:
    """List and read resources."""


@resources.command("list")
@config_option
def list_resources(config_path: str | None) -> None:
    """Show static resources and resource templates."""
    app = build_app_or_exit(config_path)
    print_resources_table(app.catalog.list_resources(), app.catalog.list_resource_templates())


@resources.command("read")
@click.argument("uri")
@config_option
def read(uri: str, config_path: str | None) -> None:
    """Print the contents of resource URI."""
    from docmcp.protocol.errors import ProtocolError

    app = build_app_or_exit(config_path)
    try:
        contents = app.resources.read(uri)
    except ProtocolError as exc:
        console.print(f"[red]Error {exc.code}:[/red] {exc.message}")
        sys.exit(1)

    for content in contents:
        console.print(f"[dim]{content.uri} ({content.mime_type})[/dim]")
        console.print(content.text, markup=False, highlight=False)
