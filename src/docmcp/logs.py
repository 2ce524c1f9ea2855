"""Log reader behind the ``mcp://logs/{level}`` resource template."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_LEVELS = frozenset({"debug", "info", "warn", "error", "all", "trace"})
MAX_LINES = 50

# Level names as they appear in formatted records; Python spells WARN as WARNING.
_MARKERS: dict[str, tuple[str, ...]] = {
    "DEBUG": (" DEBUG ",),
    "INFO": (" INFO ",),
    "WARN": (" WARN ", " WARNING "),
    "ERROR": (" ERROR ", " CRITICAL "),
    "TRACE": (" TRACE ",),
}


def is_valid_level(level: str) -> bool:
    return level.strip().lower() in LOG_LEVELS


class LogReader:
    """Read back recent lines of a given level from the server log file.

    *paths* are tried in order and the first existing file is used.  The
    returned text is always a non-empty markdown document, even when no
    log file exists yet.
    """

    def __init__(
        self,
        paths: Sequence[str | Path],
        *,
        max_lines: int = MAX_LINES,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._paths = [Path(p) for p in paths]
        self._max_lines = max_lines
        self._now = now

    def read(self, level: str) -> str:
        """Return the framed log excerpt for *level*.

        Raises:
            ValueError: If *level* is not one of :data:`LOG_LEVELS`.
        """
        if not is_valid_level(level):
            msg = f"Invalid log level: {level}"
            raise ValueError(msg)
        label = level.strip().upper()
        try:
            lines = self._matching_lines(label)
        except OSError as exc:
            logger.error("Failed to read %s logs: %s", label, exc)
            return self._frame(label, f"Failed to read {label} logs: {exc}")
        if lines:
            return self._frame(label, "\n".join(lines))
        return self._frame(
            label,
            f"No {label} level logs available at this time.\n"
            "The server may have just started, no "
            f"{label.lower()} events may have occurred yet, "
            "or the log file has not been created.",
        )

    def log_file(self) -> Path | None:
        """The first configured path that exists, if any."""
        for path in self._paths:
            if path.is_file():
                return path
        return None

    def _matching_lines(self, label: str) -> list[str]:
        path = self.log_file()
        if path is None:
            logger.debug("No log file found in %s", [str(p) for p in self._paths])
            return []
        markers = _MARKERS.get(label, ())
        tail: deque[str] = deque(maxlen=self._max_lines)
        with path.open(encoding="utf-8", errors="replace") as handle:
            for raw in handle:
                line = raw.rstrip("\n")
                if label == "ALL" or any(m in line for m in markers):
                    tail.append(line)
        return list(tail)

    def _frame(self, label: str, body: str) -> str:
        retrieved = self._now().strftime("%Y-%m-%d %H:%M:%S %Z")
        return (
            f"# {label} Level Logs\n\n"
            f"Retrieved at: {retrieved}\n\n"
            f"```\n{body.strip()}\n```\n"
        )
