"""Process-wide logging configuration.

Console output goes to stderr through :class:`rich.logging.RichHandler`
because stdout carries protocol frames.  A rotating plain-text file keeps
the records the ``mcp://logs/{level}`` resource reads back, in a format
whose `` LEVEL `` column the log reader filters on.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(threadName)s] %(name)s - %(message)s"
_HANDLER_TAG = "_docmcp_handler"


def configure_logging(level: str | int = "INFO", log_file: str | Path | None = None) -> None:
    """Install docmcp's handlers on the root logger, replacing earlier ones.

    Calling this again swaps the handlers instead of stacking them.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    console = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    _install(root, console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        _install(root, file_handler)

    root.setLevel(level.upper() if isinstance(level, str) else level)
    # third-party clients are chatty at INFO
    for noisy in ("httpx", "httpcore", "LiteLLM"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _install(root: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_TAG, True)
    root.addHandler(handler)
