"""Server configuration — YAML file plus environment overrides.

Example ``docmcp.yaml``::

    server:
      name: docmcp
      max_workers: 8
    llm:
      model: openai/gpt-4o-mini
      api_key: ${OPENAI_API_KEY}
    database:
      base_url: http://localhost:8000
      username: admin
      password: ${MARKLOGIC_PASSWORD}
    docs:
      paths: [./docs]
    logging:
      level: DEBUG

Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded before
parsing.  ``DOCMCP_LLM_MODEL``, ``DOCMCP_LLM_API_KEY`` and ``DOCMCP_DB_URL``
override the matching fields after the file is read.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from docmcp import __version__
from docmcp.protocol.models import DEFAULT_PROTOCOL_VERSION


class ConfigError(Exception):
    """Raised when a configuration file cannot be read, parsed, or validated."""


class ServerSection(BaseModel):
    name: str = "docmcp"
    version: str = __version__
    default_protocol_version: str = DEFAULT_PROTOCOL_VERSION
    max_workers: int = Field(default=8, ge=1)


class LLMConfig(BaseModel):
    """Language model settings.

    ``model`` uses LiteLLM's ``provider/model_name`` convention.  Leaving it
    unset means no language model is configured and the tools fall back to
    their offline behaviour.
    """

    model: str | None = None
    api_key: str | None = None
    api_base: str | None = None
    temperature: float = 0.2
    max_tokens: int = 1024
    timeout: float = 60.0

    @property
    def enabled(self) -> bool:
        return bool(self.model)


class DatabaseConfig(BaseModel):
    """MarkLogic REST endpoint used by ``search_marklogic``."""

    base_url: str | None = None
    username: str | None = None
    password: str | None = None
    database: str | None = None
    timeout: float = 30.0
    page_length: int = Field(default=10, ge=1)

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)


class DocsConfig(BaseModel):
    paths: list[Path] = Field(default_factory=lambda: list[Path]())
    chunk_size: int = Field(default=1500, ge=100)
    chunk_overlap: int = Field(default=200, ge=0)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Path | None = Path("logs/docmcp.log")


class TelemetryConfig(BaseModel):
    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerConfig(BaseModel):
    """Top-level configuration for a docmcp server process."""

    server: ServerSection = Field(default_factory=ServerSection)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    docs: DocsConfig = Field(default_factory=DocsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)


class ConfigLoader:
    """Load and validate a YAML file into a :class:`ServerConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ServerConfig:
        """Read YAML, interpolate env vars, and validate.

        Raises:
            ConfigError: On read errors, YAML parse errors, or schema validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config YAML must be a mapping")

        try:
            return ServerConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def apply_env_overrides(config: ServerConfig, environ: Mapping[str, str] | None = None) -> ServerConfig:
    """Return *config* with ``DOCMCP_*`` environment overrides applied."""
    env = os.environ if environ is None else environ
    llm_updates: dict[str, Any] = {}
    if env.get("DOCMCP_LLM_MODEL"):
        llm_updates["model"] = env["DOCMCP_LLM_MODEL"]
    if env.get("DOCMCP_LLM_API_KEY"):
        llm_updates["api_key"] = env["DOCMCP_LLM_API_KEY"]
    db_updates: dict[str, Any] = {}
    if env.get("DOCMCP_DB_URL"):
        db_updates["base_url"] = env["DOCMCP_DB_URL"]
    if not llm_updates and not db_updates:
        return config
    return config.model_copy(
        update={
            "llm": config.llm.model_copy(update=llm_updates),
            "database": config.database.model_copy(update=db_updates),
        }
    )


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerConfig:
    """Load configuration from *path*, or defaults when no path is given."""
    config = ServerConfig() if path is None else ConfigLoader(Path(path)).load()
    return apply_env_overrides(config, environ)
