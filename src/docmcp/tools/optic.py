"""Optic code tools — ``optic_code_generator`` and ``verify_optic_code``."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from importlib import resources
from typing import Any

from docmcp.collaborators.errors import GenerationError
from docmcp.collaborators.llm import TextGenerator
from docmcp.protocol.models import ToolResult
from docmcp.tools.args import OpticCodeArgs, VerifyOpticArgs, parse_arguments

logger = logging.getLogger(__name__)

GENERATOR_NAME = "optic_code_generator"
VERIFIER_NAME = "verify_optic_code"
JS_MIME_TYPE = "text/javascript"

_GENERATION_PROMPT = """\
You are an expert MarkLogic Optic API developer.
Optic code reads rows from a MarkLogic database and transforms them.

Reference examples of the Optic API:

{examples}

Using the patterns above, write practical, commented Optic code for this request:

{request}

Reply with the code only.
"""

_FALLBACK_TEMPLATE = """\
// Language model unavailable: starting template for the request below.
// Request: {request}

const op = require('/MarkLogic/optic');

op.fromView('schema', 'view')
  .where(op.ne(op.col('deleted'), true))
  .select(['*'])
  .orderBy('id')
  .result();
"""


@lru_cache(maxsize=1)
def load_optic_examples() -> str:
    """Return the packaged Optic reference library."""
    return (
        resources.files("docmcp.tools")
        .joinpath("data/optic_examples.js")
        .read_text(encoding="utf-8")
    )


def build_generation_prompt(request: str) -> str:
    return _GENERATION_PROMPT.format(examples=load_optic_examples(), request=request)


class OpticCodeGeneratorTool:
    """Generate Optic code with the language model, or a template without one."""

    def __init__(self, generator: TextGenerator | None) -> None:
        self._generator = generator

    def __call__(self, arguments: dict[str, Any] | None) -> ToolResult:
        args = parse_arguments(OpticCodeArgs, GENERATOR_NAME, arguments)
        if self._generator is not None:
            try:
                code = self._generator.generate(build_generation_prompt(args.prompt))
            except GenerationError as exc:
                logger.warning("Optic generation failed, using template: %s", exc)
            else:
                if code.strip():
                    return ToolResult.from_text(
                        code, mime_type=JS_MIME_TYPE, metadata={"source": "llm"}
                    )
                logger.warning("Empty Optic generation reply, using template")
        return ToolResult.from_text(
            _FALLBACK_TEMPLATE.format(request=args.prompt),
            mime_type=JS_MIME_TYPE,
            metadata={"source": "template"},
        )


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

_PAIRS = {")": "(", "]": "[", "}": "{"}
_ACCESSOR = re.compile(r"\bop\s*\.\s*from[A-Z]\w*\s*\(")
_TERMINAL = re.compile(r"\.\s*(result|explain|generateView|export)\s*\([^()]*\)\s*;?\s*$")
_QUOTES = "'\"`"


def check_optic_code(code: str) -> list[str]:
    """Return the structural problems found in *code* (empty when it looks valid)."""
    stripped, issues = _strip_literals(code)

    stack: list[str] = []
    for char in stripped:
        if char in "([{":
            stack.append(char)
        elif char in _PAIRS:
            if not stack or stack[-1] != _PAIRS[char]:
                issues.append(f"Unbalanced '{char}'")
                break
            stack.pop()
    else:
        if stack:
            issues.append(f"Unclosed '{stack[-1]}'")

    if not _ACCESSOR.search(stripped):
        issues.append("No Optic accessor such as op.fromView(...) or op.fromSQL(...)")
    if not _TERMINAL.search(stripped.strip()):
        issues.append("Plan does not end with a terminal call such as .result()")
    return issues


def _strip_literals(code: str) -> tuple[str, list[str]]:
    """Drop comments and blank out string contents in a single scan.

    Quotes inside comments and comment markers inside strings are plain
    text.  A string left open at the end of its line is reported and closed
    there so the rest of the code is still checked.
    """
    out: list[str] = []
    issues: list[str] = []
    i, n = 0, len(code)
    while i < n:
        char = code[i]
        pair = code[i : i + 2]
        if pair == "//":
            end = code.find("\n", i)
            i = n if end == -1 else end
        elif pair == "/*":
            end = code.find("*/", i + 2)
            if end == -1:
                issues.append("Unterminated block comment")
                i = n
            else:
                out.append(" ")
                i = end + 2
        elif char in _QUOTES:
            i = _skip_string(code, i, out, issues)
        else:
            out.append(char)
            i += 1
    return "".join(out), issues


def _skip_string(code: str, start: int, out: list[str], issues: list[str]) -> int:
    """Emit an empty literal for the string opening at *start*; return the index after it."""
    quote = code[start]
    out.append(quote)
    i = start + 1
    while i < len(code):
        char = code[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            out.append(quote)
            return i + 1
        if char == "\n" and quote != "`":
            break
        i += 1
    issues.append(f"Unterminated string literal ({quote})")
    out.append(quote)
    return i


class VerifyOpticCodeTool:
    """Structural checks over Optic code; the verdict is deterministic."""

    def __call__(self, arguments: dict[str, Any] | None) -> ToolResult:
        args = parse_arguments(VerifyOpticArgs, VERIFIER_NAME, arguments)
        code = args.optic_code
        issues = check_optic_code(code)
        valid = not issues

        lines = [
            f"Optic code verification: {'VALID' if valid else 'INVALID'}",
            f"Code length: {len(code)} characters",
        ]
        if issues:
            lines.append("Issues:")
            lines.extend(f"- {issue}" for issue in issues)
        else:
            lines.append("No structural issues found.")
        logger.debug("Verified %d characters of Optic code: %d issue(s)", len(code), len(issues))
        return ToolResult.from_text(
            "\n".join(lines),
            mime_type="text/plain",
            metadata={
                "isValid": valid,
                "codeLength": len(code),
                "issues": issues,
                "verificationMethod": "structural",
            },
        )
