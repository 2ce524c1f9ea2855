"""Shared fixtures for the docmcp test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from docmcp.config import LoggingConfig, ServerConfig
from docmcp.dispatch.dispatcher import RequestDispatcher
from docmcp.server.app import Application, build_server_components


def make_mock_litellm_response(content: str = "", model: str = "openai/gpt-4o-mini") -> MagicMock:
    """Create a ``MagicMock`` matching LiteLLM's response structure.

    The mock mirrors ``choices[0].message.content`` plus top-level ``usage``
    and ``model`` attributes.
    """
    message = MagicMock()
    message.content = content or None

    choice = MagicMock()
    choice.message = message
    choice.finish_reason = "stop"

    usage = MagicMock()
    usage.prompt_tokens = 10
    usage.completion_tokens = 20
    usage.total_tokens = 30

    response = MagicMock()
    response.choices = [choice]
    response.usage = usage
    response.model = model
    return response


@pytest.fixture
def litellm_response() -> Callable[..., MagicMock]:
    return make_mock_litellm_response


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "docmcp.log"


@pytest.fixture
def config(log_file: Path) -> ServerConfig:
    return ServerConfig(logging=LoggingConfig(file=log_file))


@pytest.fixture
def app(config: ServerConfig) -> Application:
    return build_server_components(config)


@pytest.fixture
def dispatcher(app: Application) -> RequestDispatcher:
    return app.dispatcher


@pytest.fixture
def rpc(dispatcher: RequestDispatcher) -> Callable[..., dict[str, Any]]:
    """Send one request through the dispatcher and return the wire reply."""

    def _call(method: str, params: dict[str, Any] | None = None, request_id: Any = 1) -> dict[str, Any]:
        frame: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
        if params is not None:
            frame["params"] = params
        return dispatcher.dispatch(frame).to_wire()

    return _call


@pytest.fixture
def generator() -> MagicMock:
    """A stand-in :class:`TextGenerator` whose replies tests set per case."""
    fake = MagicMock()
    fake.generate.return_value = "generated text"
    return fake
