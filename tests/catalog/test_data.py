"""Tests for the catalog docmcp ships with."""

from __future__ import annotations

from docmcp.catalog.data import PROMPTS, RESOURCE_TEMPLATES, RESOURCES, TOOL_DOCS, TOOLS
from docmcp.catalog.models import LOGS_TEMPLATE, SERVER_INFO_URI, TOOL_DOCS_TEMPLATE, TOOL_EXAMPLES_URI

TOOL_NAMES = ["generate_text", "optic_code_generator", "verify_optic_code", "marklogic_docs", "search_marklogic"]


class TestDefaultTools:
    def test_tool_names(self) -> None:
        assert [t.name for t in TOOLS] == TOOL_NAMES

    def test_every_tool_documented(self) -> None:
        assert set(TOOL_DOCS) == set(TOOL_NAMES)

    def test_schemas_are_objects_with_required_fields(self) -> None:
        for tool in TOOLS:
            schema = tool.input_schema
            assert schema["type"] == "object"
            assert "title" not in schema
            assert schema["required"], tool.name
            for name in schema["required"]:
                assert name in schema["properties"]

    def test_generate_text_schema_uses_wire_names(self) -> None:
        schema = next(t for t in TOOLS if t.name == "generate_text").input_schema
        assert set(schema["properties"]) == {"prompt", "maxTokens"}
        assert schema["required"] == ["prompt"]
        assert schema["properties"]["maxTokens"]["default"] == 100

    def test_verify_schema_requires_code(self) -> None:
        schema = next(t for t in TOOLS if t.name == "verify_optic_code").input_schema
        assert schema["required"] == ["optic_code"]


class TestDefaultResources:
    def test_static_resources(self) -> None:
        assert [r.uri for r in RESOURCES] == [SERVER_INFO_URI, TOOL_EXAMPLES_URI]

    def test_templates(self) -> None:
        assert [t.uri_template for t in RESOURCE_TEMPLATES] == [LOGS_TEMPLATE, TOOL_DOCS_TEMPLATE]

    def test_prompts(self) -> None:
        assert [p.name for p in PROMPTS] == ["code_review", "generate_docs"]
        assert all("{{" in p.template for p in PROMPTS)
