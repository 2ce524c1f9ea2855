"""Shared CLI helpers for loading configuration and building components."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from docmcp.cli_commands._output import err_console

if TYPE_CHECKING:
    from docmcp.config import ServerConfig
    from docmcp.server.app import Application

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML configuration file.",
)


def load_config_or_exit(config_path: str | None) -> ServerConfig:
    from docmcp.config import ConfigError, load_config

    try:
        return load_config(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)


def build_app_or_exit(config_path: str | None, config: ServerConfig | None = None) -> Application:
    """Build the application from *config*, or from the file at *config_path*."""
    from docmcp.server.app import build_server_components

    if config is None:
        config = load_config_or_exit(config_path)
    try:
        return build_server_components(config)
    except Exception as exc:
        err_console.print(f"[red]Startup error:[/red] {exc}")
        sys.exit(1)

