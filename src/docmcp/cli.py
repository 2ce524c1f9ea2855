"""docmcp CLI entrypoint."""

from __future__ import annotations

import click

from docmcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="docmcp")
def main() -> None:
    """docmcp — MCP document and tool server."""


# Register subcommands
from docmcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
