"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from docmcp.catalog.models import ResourceDescriptor, ResourceTemplate, ToolDescriptor  # noqa: TC001
from docmcp.protocol.models import ToolResult  # noqa: TC001

console = Console()
err_console = Console(stderr=True)


def print_tools_table(tools: list[ToolDescriptor]) -> None:
    """Pretty-print tool descriptors as a table."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Required")

    for tool in tools:
        required = ", ".join(tool.input_schema.get("required", [])) or "-"
        table.add_row(tool.name, _truncate(tool.description), required)

    console.print(table)


def print_resources_table(
    resources: list[ResourceDescriptor], templates: list[ResourceTemplate]
) -> None:
    """Pretty-print static resources and resource templates in one table."""
    table = Table(title="Resources")
    table.add_column("URI", style="cyan")
    table.add_column("Kind")
    table.add_column("MIME type")
    table.add_column("Description")

    for resource in resources:
        table.add_row(resource.uri, "static", resource.mime_type, _truncate(resource.description))
    for template in templates:
        table.add_row(
            template.uri_template, "template", template.mime_type, _truncate(template.description)
        )

    console.print(table)


def print_tool_result(result: ToolResult, *, as_json: bool = False) -> None:
    """Print a tool result as text or as its wire JSON."""
    if as_json:
        console.print_json(json.dumps(result.to_wire(), default=str))
        return

    style = "red" if result.is_error else "green"
    label = "error" if result.is_error else "ok"
    console.print(f"[{style}]{label}[/{style}]" + (f" ({result.mime_type})" if result.mime_type else ""))
    console.print(result.text, markup=False, highlight=False)
    if result.metadata:
        console.print("\n[bold]Metadata:[/bold]")
        for key, val in result.metadata.items():
            console.print(f"  {key}: {_truncate(_render(val))}", markup=False)


def _render(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, default=str)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
