"""Catalog — read-only lookup over the descriptors fixed at startup."""

from __future__ import annotations

from typing import Any

from docmcp.catalog.models import (
    PromptDescriptor,
    ResourceDescriptor,
    ResourceTemplate,
    ToolDescriptor,
)
from docmcp.protocol.errors import InvalidParamsError
from docmcp.protocol.models import DEFAULT_PROTOCOL_VERSION


class Catalog:
    """Static descriptors of the tools, resources, templates, and prompts on offer.

    Nothing here mutates after construction, so a single instance is shared
    by every request thread without locking.

    Usage::

        catalog = build_default_catalog()
        catalog.describe_server("2025-06-18")["protocolVersion"]  # echoed
        [t.name for t in catalog.list_tools()]
    """

    def __init__(
        self,
        *,
        server_name: str,
        server_version: str,
        tools: list[ToolDescriptor],
        resources: list[ResourceDescriptor],
        resource_templates: list[ResourceTemplate],
        prompts: list[PromptDescriptor] | None = None,
        tool_docs: dict[str, str] | None = None,
        tool_examples: str = "",
        default_protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        self.server_name = server_name
        self.server_version = server_version
        self.default_protocol_version = default_protocol_version
        self._tools: dict[str, ToolDescriptor] = {t.name: t for t in tools}
        self._resources: dict[str, ResourceDescriptor] = {r.uri: r for r in resources}
        self._templates = tuple(resource_templates)
        self._prompts: dict[str, PromptDescriptor] = {p.name: p for p in prompts or []}
        self._tool_docs = dict(tool_docs or {})
        self._tool_examples = tool_examples

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_tools(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def list_resources(self) -> list[ResourceDescriptor]:
        return list(self._resources.values())

    def list_resource_templates(self) -> list[ResourceTemplate]:
        return list(self._templates)

    def list_prompts(self) -> list[PromptDescriptor]:
        return list(self._prompts.values())

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def tool_names(self) -> list[str]:
        return list(self._tools)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def get_tool(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def get_resource(self, uri: str) -> ResourceDescriptor | None:
        return self._resources.get(uri)

    def find_template(self, name: str) -> ResourceTemplate | None:
        """Return the template whose ``name`` equals *name*."""
        for template in self._templates:
            if template.name == name:
                return template
        return None

    def tool_documentation(self, name: str) -> str | None:
        """Markdown documentation for a tool, or ``None`` for unknown tools."""
        if name not in self._tools:
            return None
        return self._tool_docs.get(name) or _generated_docs(self._tools[name])

    def tool_examples(self) -> str:
        return self._tool_examples

    def get_prompt(self, name: str) -> dict[str, Any]:
        """Return the prompt body for ``prompts/get``.

        Raises:
            InvalidParamsError: If no prompt is registered under *name*.
        """
        prompt = self._prompts.get(name)
        if prompt is None:
            raise InvalidParamsError(
                f"Unknown prompt: {name}",
                data={"available": list(self._prompts)},
            )
        return {
            "name": prompt.name,
            "description": prompt.description,
            "prompt": prompt.template,
        }

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def describe_server(self, protocol_version: str | None = None) -> dict[str, Any]:
        """Build the ``initialize`` result.

        The caller's *protocol_version* is echoed when given so version
        negotiation is visible to the client; otherwise the server default
        is reported.
        """
        return {
            "protocolVersion": protocol_version or self.default_protocol_version,
            "serverInfo": {"name": self.server_name, "version": self.server_version},
            "capabilities": {
                "tools": {"listChanged": True},
                "resources": {"subscribe": True, "listChanged": True},
                "resourceTemplates": {"listChanged": True},
                "prompts": {"listChanged": bool(self._prompts)},
                "completion": {"enabled": True},
            },
        }


def _generated_docs(tool: ToolDescriptor) -> str:
    lines = [f"# {tool.name}", "", tool.description, "", "## Parameters", ""]
    properties: dict[str, Any] = tool.input_schema.get("properties", {})
    required = set(tool.input_schema.get("required", []))
    for name, schema in properties.items():
        flag = "required" if name in required else "optional"
        lines.append(f"- **{name}** ({flag}): {schema.get('description', '')}")
    if not properties:
        lines.append("_No parameters._")
    return "\n".join(lines)
