"""Language model boundary — synchronous text generation via LiteLLM."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import litellm

from docmcp.collaborators.errors import CollaboratorUnavailableError, GenerationError
from docmcp.config import LLMConfig
from docmcp.utils.telemetry import ATTR_MODEL, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into text."""

    def generate(self, prompt: str, *, max_tokens: int | None = None) -> str:
        """Return the model's reply to *prompt*.

        Raises:
            GenerationError: If the call fails.
        """
        ...


class LiteLLMGenerator:
    """Blocking :class:`TextGenerator` backed by ``litellm.completion``.

    Usage::

        generator = LiteLLMGenerator(LLMConfig(model="openai/gpt-4o-mini"))
        generator.generate("Write a haiku about indexes")
    """

    def __init__(self, config: LLMConfig) -> None:
        if not config.model:
            msg = "LiteLLMGenerator requires llm.model to be set"
            raise CollaboratorUnavailableError(msg)
        self.config = config

    def generate(self, prompt: str, *, max_tokens: int | None = None) -> str:
        with _tracer.start_as_current_span("llm.generate") as span:
            span.set_attribute(ATTR_MODEL, self.config.model or "")
            call_kwargs: dict[str, Any] = {
                "model": self.config.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self.config.temperature,
                "max_tokens": max_tokens or self.config.max_tokens,
                "timeout": self.config.timeout,
            }
            if self.config.api_key:
                call_kwargs["api_key"] = self.config.api_key
            if self.config.api_base:
                call_kwargs["api_base"] = self.config.api_base

            try:
                response = litellm.completion(**call_kwargs)  # pyright: ignore[reportUnknownMemberType]
            except Exception as exc:
                logger.warning("LLM call to %s failed: %s", self.config.model, exc)
                raise GenerationError(str(exc)) from exc

            return _reply_text(response)


def _reply_text(response: Any) -> str:
    """Pull the assistant text out of an OpenAI-compatible response."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as exc:
        raise GenerationError(f"Malformed model response: {exc}") from exc
    return content or ""
