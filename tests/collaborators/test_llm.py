"""Tests for the LiteLLM-backed text generator."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock, patch

import pytest

from docmcp.collaborators.errors import CollaboratorUnavailableError, GenerationError
from docmcp.collaborators.llm import LiteLLMGenerator
from docmcp.config import LLMConfig


class TestLiteLLMGenerator:
    def test_requires_model(self) -> None:
        with pytest.raises(CollaboratorUnavailableError):
            LiteLLMGenerator(LLMConfig())

    def test_generate(self, litellm_response: Callable[..., MagicMock]) -> None:
        config = LLMConfig(model="openai/gpt-4o-mini", temperature=0.1, max_tokens=256, timeout=5)
        with patch("litellm.completion", return_value=litellm_response("Hello there")) as mock_completion:
            reply = LiteLLMGenerator(config).generate("Say hello")

        assert reply == "Hello there"
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o-mini"
        assert kwargs["messages"] == [{"role": "user", "content": "Say hello"}]
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 256
        assert kwargs["timeout"] == 5
        assert "api_key" not in kwargs
        assert "api_base" not in kwargs

    def test_per_call_max_tokens_and_credentials(self, litellm_response: Callable[..., MagicMock]) -> None:
        config = LLMConfig(model="openai/gpt-4o-mini", api_key="sk-test", api_base="http://localhost:4000")
        with patch("litellm.completion", return_value=litellm_response("ok")) as mock_completion:
            LiteLLMGenerator(config).generate("x", max_tokens=12)

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["max_tokens"] == 12
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["api_base"] == "http://localhost:4000"

    def test_empty_content(self, litellm_response: Callable[..., MagicMock]) -> None:
        with patch("litellm.completion", return_value=litellm_response("")):
            assert LiteLLMGenerator(LLMConfig(model="m")).generate("x") == ""

    def test_call_failure(self) -> None:
        with (
            patch("litellm.completion", side_effect=RuntimeError("connection refused")),
            pytest.raises(GenerationError, match="connection refused"),
        ):
            LiteLLMGenerator(LLMConfig(model="m")).generate("x")

    def test_malformed_response(self) -> None:
        response = MagicMock()
        response.choices = []
        with patch("litellm.completion", return_value=response), pytest.raises(GenerationError, match="Malformed"):
            LiteLLMGenerator(LLMConfig(model="m")).generate("x")
