"""Tests for tool argument models."""

from __future__ import annotations

import pytest

from docmcp.tools.args import (
    DocsQueryArgs,
    GenerateTextArgs,
    OpticCodeArgs,
    SearchArgs,
    ToolArguments,
    VerifyOpticArgs,
    input_schema,
    parse_arguments,
)
from docmcp.tools.errors import ToolArgumentsError

ALL_MODELS: list[tuple[type[ToolArguments], str]] = [
    (GenerateTextArgs, "prompt"),
    (OpticCodeArgs, "prompt"),
    (VerifyOpticArgs, "optic_code"),
    (DocsQueryArgs, "prompt"),
    (SearchArgs, "prompt"),
]


class TestParseArguments:
    def test_valid(self) -> None:
        args = parse_arguments(GenerateTextArgs, "generate_text", {"prompt": "hi", "maxTokens": 50})
        assert args.prompt == "hi"
        assert args.max_tokens == 50

    def test_snake_case_accepted(self) -> None:
        args = parse_arguments(GenerateTextArgs, "generate_text", {"prompt": "hi", "max_tokens": 7})
        assert args.max_tokens == 7

    def test_defaults(self) -> None:
        assert parse_arguments(GenerateTextArgs, "generate_text", {"prompt": "hi"}).max_tokens == 100
        assert parse_arguments(DocsQueryArgs, "marklogic_docs", {"prompt": "hi"}).limit == 5

    def test_prompt_is_stripped(self) -> None:
        assert parse_arguments(SearchArgs, "search_marklogic", {"prompt": "  neural  "}).prompt == "neural"

    def test_extra_fields_ignored(self) -> None:
        args = parse_arguments(OpticCodeArgs, "optic_code_generator", {"prompt": "x", "other": 1})
        assert args.prompt == "x"

    def test_out_of_range(self) -> None:
        with pytest.raises(ToolArgumentsError, match="maxTokens"):
            parse_arguments(GenerateTextArgs, "generate_text", {"prompt": "hi", "maxTokens": 0})

    def test_non_dict_arguments(self) -> None:
        with pytest.raises(ToolArgumentsError, match="must be an object"):
            parse_arguments(SearchArgs, "search_marklogic", ["prompt"])  # type: ignore[arg-type]


@pytest.mark.parametrize(("model", "field"), ALL_MODELS)
class TestUniformRejection:
    def test_absent_arguments(self, model: type[ToolArguments], field: str) -> None:
        with pytest.raises(ToolArgumentsError, match="no arguments provided"):
            parse_arguments(model, "tool", None)

    def test_missing_required(self, model: type[ToolArguments], field: str) -> None:
        with pytest.raises(ToolArgumentsError) as exc_info:
            parse_arguments(model, "tool", {})
        assert field in exc_info.value.detail

    def test_wrong_type(self, model: type[ToolArguments], field: str) -> None:
        with pytest.raises(ToolArgumentsError) as exc_info:
            parse_arguments(model, "tool", {field: 42})
        assert field in exc_info.value.detail

    def test_blank_string(self, model: type[ToolArguments], field: str) -> None:
        with pytest.raises(ToolArgumentsError):
            parse_arguments(model, "tool", {field: "   "})

    def test_schema_marks_field_required(self, model: type[ToolArguments], field: str) -> None:
        schema = input_schema(model)
        assert field in schema["required"]
        assert schema["properties"][field]["type"] == "string"
