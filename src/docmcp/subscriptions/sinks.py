"""Notification sinks — where fan-out hands each resource notification.

The registry never calls a sink while holding its lock, so a sink may block
(write to a pipe, push to a queue) without stalling subscribe/unsubscribe.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Protocol

from docmcp.subscriptions.models import ResourceNotification

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Delivery protocol for resource-update notifications."""

    def deliver(self, client_id: str, notification: ResourceNotification) -> None:
        """Hand *notification* to the client identified by *client_id*."""
        ...


class LoggingSink:
    """Sink that only records each notification in the log."""

    def deliver(self, client_id: str, notification: ResourceNotification) -> None:
        params = notification.params
        logger.info(
            "Notify %s: %s updated (subscription %s)",
            client_id,
            params.uri,
            params.subscription_id,
        )


class QueueSink:
    """Per-client push channels backed by :class:`queue.Queue`.

    Usage::

        sink = QueueSink()
        registry = SubscriptionRegistry(sink=sink)
        registry.subscribe("mcp://logs/info", "client-a")
        registry.notify_resource_updated("mcp://logs/info")
        sink.drain("client-a")  # -> [ResourceNotification(...)]
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._channels: dict[str, queue.Queue[ResourceNotification]] = {}

    def channel(self, client_id: str) -> queue.Queue[ResourceNotification]:
        """Return (creating on first use) the queue for *client_id*."""
        with self._lock:
            channel = self._channels.get(client_id)
            if channel is None:
                channel = queue.Queue()
                self._channels[client_id] = channel
            return channel

    def deliver(self, client_id: str, notification: ResourceNotification) -> None:
        self.channel(client_id).put(notification)

    def drain(self, client_id: str) -> list[ResourceNotification]:
        """Remove and return everything queued for *client_id*."""
        channel = self.channel(client_id)
        drained: list[ResourceNotification] = []
        while True:
            try:
                drained.append(channel.get_nowait())
            except queue.Empty:
                return drained


class CompositeSink:
    """Forward every notification to several sinks in order."""

    def __init__(self, *sinks: NotificationSink) -> None:
        self._sinks = list(sinks)

    def add(self, sink: NotificationSink) -> None:
        self._sinks.append(sink)

    def deliver(self, client_id: str, notification: ResourceNotification) -> None:
        for sink in self._sinks:
            sink.deliver(client_id, notification)
