"""Per-tool argument models.

Each model doubles as the tool's published ``inputSchema`` (via
:func:`input_schema`) and as the validator applied before a handler runs, so
the advertised schema and the enforced one cannot drift apart.
"""

from __future__ import annotations

from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, Field, StringConstraints, ValidationError

from docmcp.tools.errors import ToolArgumentsError

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ToolArguments(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}


M = TypeVar("M", bound=ToolArguments)


class GenerateTextArgs(ToolArguments):
    prompt: NonBlank = Field(description="The text prompt to generate content from")
    max_tokens: int = Field(
        default=100,
        ge=1,
        le=8192,
        alias="maxTokens",
        description="Maximum number of tokens to generate",
    )


class OpticCodeArgs(ToolArguments):
    prompt: NonBlank = Field(description="What the generated Optic code should do")


class VerifyOpticArgs(ToolArguments):
    optic_code: NonBlank = Field(description="The Optic code to verify")


class DocsQueryArgs(ToolArguments):
    prompt: NonBlank = Field(description="The question to look up in the documentation")
    limit: int = Field(default=5, ge=1, le=20, description="Maximum number of passages")


class SearchArgs(ToolArguments):
    prompt: NonBlank = Field(description="Natural-language description of the documents to find")


def input_schema(model: type[ToolArguments]) -> dict[str, Any]:
    """Return the JSON Schema published for *model*."""
    schema = model.model_json_schema(by_alias=True)
    schema.pop("title", None)
    schema.setdefault("required", [])
    return schema


def parse_arguments(
    model: type[M], tool_name: str, arguments: dict[str, Any] | None
) -> M:
    """Validate raw ``tools/call`` arguments against *model*.

    Absent arguments, missing required fields, and wrong types are all
    reported through :class:`ToolArgumentsError` for every tool alike.

    Raises:
        ToolArgumentsError: On any validation failure.
    """
    if arguments is None:
        raise ToolArgumentsError(tool_name, "no arguments provided")
    if not isinstance(arguments, dict):
        raise ToolArgumentsError(tool_name, "arguments must be an object")
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise ToolArgumentsError(tool_name, _describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error.get("loc", ())) or "arguments"
        parts.append(f"{field}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)
