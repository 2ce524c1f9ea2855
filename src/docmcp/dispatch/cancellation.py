"""Advisory cancellation flags keyed by progress token."""

from __future__ import annotations

import threading

from docmcp.protocol.models import JsonScalar


class CancellationRegistry:
    """Thread-safe set of cancelled progress tokens.

    Cancelling never interrupts running work; a long-running handler may
    poll :meth:`is_cancelled` and stop early.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled: set[JsonScalar] = set()

    def cancel(self, token: JsonScalar) -> None:
        with self._lock:
            self._cancelled.add(token)

    def is_cancelled(self, token: JsonScalar) -> bool:
        with self._lock:
            return token in self._cancelled

    def clear(self, token: JsonScalar) -> None:
        with self._lock:
            self._cancelled.discard(token)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cancelled)
