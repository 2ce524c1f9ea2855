"""Stdio transport — newline-delimited JSON-RPC over stdin/stdout.

Each inbound line is handed to a thread pool so slow tool calls do not hold
up other requests.  Replies may therefore be written out of order; clients
correlate them by ``id``.  Writes to stdout are serialised by a lock so
frames never interleave.
"""

from __future__ import annotations

import logging
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TextIO

from docmcp.dispatch.dispatcher import RequestDispatcher
from docmcp.protocol.codec import DecodeError, decode_request, encode_frame, encode_notification
from docmcp.subscriptions.models import ResourceNotification

logger = logging.getLogger(__name__)


class StdioServer:
    """Serve a :class:`RequestDispatcher` over a pair of text streams.

    Also a :class:`~docmcp.subscriptions.sinks.NotificationSink`: resource
    updates are written to the same output stream as responses.

    Usage::

        server = StdioServer(dispatcher, max_workers=8)
        registry.set_sink(server)
        server.serve()  # returns once stdin is closed and work has drained
    """

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        *,
        max_workers: int = 8,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._max_workers = max_workers
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._write_lock = threading.Lock()

    def serve(self) -> None:
        """Read frames until EOF, then wait for in-flight requests to finish."""
        logger.info("Serving on stdio with %d worker(s)", self._max_workers)
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="docmcp-worker"
        ) as pool:
            for line in self._stdin:
                frame = line.strip()
                if frame:
                    pool.submit(self.handle_line, frame).add_done_callback(_log_failure)
        logger.info("Input closed; server stopped")

    def handle_line(self, frame: str) -> None:
        """Answer one frame, writing the reply unless the frame carried no id."""
        decoded = decode_request(frame)
        if isinstance(decoded, DecodeError):
            logger.warning("Rejected frame: %s (%s)", decoded.message, decoded.detail)
            self._write(encode_frame(decoded.to_response()))
            return
        response = self._dispatcher.handle(decoded)
        if self._dispatcher.is_notification(decoded):
            logger.debug("No reply for notification %s", decoded.method)
            return
        self._write(encode_frame(response))

    def deliver(self, client_id: str, notification: ResourceNotification) -> None:
        # stdio has one peer, so every client id maps to it
        self._write(encode_notification(notification))

    def _write(self, line: str) -> None:
        with self._write_lock:
            try:
                self._stdout.write(line + "\n")
                self._stdout.flush()
            except (BrokenPipeError, ValueError) as exc:
                logger.error("Could not write frame: %s", exc)


def _log_failure(future: Future[None]) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Request worker crashed", exc_info=exc)
