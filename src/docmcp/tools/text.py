"""``generate_text`` — free-form generation through the language model."""

from __future__ import annotations

import logging
from typing import Any

from docmcp.collaborators.errors import GenerationError
from docmcp.collaborators.llm import TextGenerator
from docmcp.protocol.models import ToolResult
from docmcp.tools.args import GenerateTextArgs, parse_arguments

logger = logging.getLogger(__name__)

NAME = "generate_text"
MIME_TYPE = "text/plain"


class GenerateTextTool:
    def __init__(self, generator: TextGenerator | None) -> None:
        self._generator = generator

    def __call__(self, arguments: dict[str, Any] | None) -> ToolResult:
        args = parse_arguments(GenerateTextArgs, NAME, arguments)
        if self._generator is None:
            logger.warning("No language model configured; answering %s with a mock", NAME)
            return ToolResult.from_text(
                f"Language model not configured. Mock response for prompt: {args.prompt}",
                mime_type=MIME_TYPE,
            )

        try:
            reply = self._generator.generate(args.prompt, max_tokens=args.max_tokens)
        except GenerationError as exc:
            logger.error("Text generation failed: %s", exc)
            return ToolResult.from_text(
                f"Text generation failed: {exc}", is_error=True, mime_type=MIME_TYPE
            )

        if not reply.strip():
            return ToolResult.from_text(
                "Language model response was incomplete", is_error=True, mime_type=MIME_TYPE
            )
        logger.debug("Generated %d characters", len(reply))
        return ToolResult.from_text(reply, mime_type=MIME_TYPE)
