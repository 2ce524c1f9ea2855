"""``docmcp serve`` — run the MCP server over stdio."""

from __future__ import annotations

import click

from docmcp.cli_commands._app import build_app_or_exit, config_option, load_config_or_exit
from docmcp.cli_commands._output import err_console


@click.command()
@config_option
@click.option("--log-level", default=None, help="Override logging.level from the config.")
def serve(config_path: str | None, log_level: str | None) -> None:
    """Serve MCP requests on stdin/stdout until stdin closes."""
    from docmcp.logging_setup import configure_logging
    from docmcp.utils.telemetry import configure_telemetry

    config = load_config_or_exit(config_path)
    configure_logging(log_level or config.logging.level, config.logging.file)

    if config.telemetry.enabled:
        try:
            configure_telemetry(
                service_name=config.server.name,
                export_to_console=config.telemetry.otlp_endpoint is None,
                otlp_endpoint=config.telemetry.otlp_endpoint,
            )
        except ImportError as exc:
            err_console.print(f"[yellow]Telemetry disabled:[/yellow] {exc}")

    app = build_app_or_exit(config_path, config)
    server = app.stdio_server()
    try:
        server.serve()
    except KeyboardInterrupt:
        err_console.print("Interrupted.")
