"""Subscription registry — concurrent bidirectional index of resource subscriptions.

The registry owns two maps:

* forward: ``subscription_id -> Subscription``
* reverse: ``uri -> {subscription_id, ...}``

Both are mutated only while holding a single internal lock, so no reader
ever observes one map updated without the other, and a reverse-index set
that becomes empty is dropped in the same critical section.  Fan-out
snapshots the subscribers under the lock and delivers outside it.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Callable

from docmcp.subscriptions.models import (
    ResourceNotification,
    SimulatedUpdate,
    Subscription,
    UnsubscribeOutcome,
    UpdatedParams,
)
from docmcp.subscriptions.sinks import LoggingSink, NotificationSink
from docmcp.utils.telemetry import ATTR_FANOUT_COUNT, ATTR_RESOURCE_URI, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class SubscriptionRegistry:
    """In-memory registry of which clients watch which resource URIs.

    Every operation is safe to call from any number of threads.  None of
    them raise on valid input: an unknown subscription id is reported
    through the return value.

    Usage::

        registry = SubscriptionRegistry(sink=QueueSink())
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        registry.notify_resource_updated("mcp://logs/debug")
        registry.unsubscribe(sub_id).status  # "unsubscribed"
    """

    def __init__(
        self,
        sink: NotificationSink | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._sink: NotificationSink = sink if sink is not None else LoggingSink()
        self._clock = clock
        self._lock = threading.Lock()
        self._by_id: dict[str, Subscription] = {}
        self._by_uri: dict[str, set[str]] = {}
        self._id_millis = 0
        self._id_suffixes: set[str] = set()

    @property
    def sink(self) -> NotificationSink:
        return self._sink

    def set_sink(self, sink: NotificationSink) -> None:
        """Replace the delivery target for future fan-outs."""
        self._sink = sink

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def subscribe(self, uri: str, client_id: str) -> str:
        """Register *client_id*'s interest in *uri* and return the new id.

        The URI is not checked against the catalog; resources may appear
        after their subscribers.  Repeated calls for the same pair create
        independent subscriptions.
        """
        created_at = self._clock()
        with self._lock:
            subscription_id = self._new_id(created_at)
            self._by_id[subscription_id] = Subscription(
                subscription_id=subscription_id,
                uri=uri,
                client_id=client_id,
                created_at=created_at,
            )
            self._by_uri.setdefault(uri, set()).add(subscription_id)
        logger.info("Subscribed %s to %s as %s", client_id, uri, subscription_id)
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> UnsubscribeOutcome:
        """Remove a subscription from both maps."""
        with self._lock:
            removed = self._by_id.pop(subscription_id, None)
            if removed is not None:
                ids = self._by_uri.get(removed.uri)
                if ids is not None:
                    ids.discard(subscription_id)
                    if not ids:
                        del self._by_uri[removed.uri]

        if removed is None:
            logger.debug("Unsubscribe for unknown id %s", subscription_id)
            return UnsubscribeOutcome(subscription_id=subscription_id, status="not_found")
        logger.info("Unsubscribed %s from %s", subscription_id, removed.uri)
        return UnsubscribeOutcome(
            subscription_id=subscription_id,
            status="unsubscribed",
            removed=removed,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_subscriptions(self) -> list[Subscription]:
        """Snapshot of active subscriptions in no particular order."""
        with self._lock:
            return [s for s in self._by_id.values() if s.active]

    def get_details(self, subscription_id: str) -> Subscription | None:
        with self._lock:
            return self._by_id.get(subscription_id)

    def subscribed_uris(self) -> set[str]:
        """Snapshot of the reverse-index keys."""
        with self._lock:
            return set(self._by_uri)

    def subscribers_of(self, uri: str) -> set[str]:
        with self._lock:
            return set(self._by_uri.get(uri, ()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    def notify_resource_updated(self, uri: str) -> list[ResourceNotification]:
        """Emit one notification per active subscriber of *uri*.

        A URI nobody watches is a silent no-op.  A subscription removed
        concurrently may or may not receive this round.  A failing sink is
        logged and skipped so the remaining subscribers are still served.
        """
        with _tracer.start_as_current_span("subscriptions.fanout") as span:
            span.set_attribute(ATTR_RESOURCE_URI, uri)
            with self._lock:
                targets = [
                    self._by_id[sid]
                    for sid in self._by_uri.get(uri, ())
                    if sid in self._by_id and self._by_id[sid].active
                ]
            span.set_attribute(ATTR_FANOUT_COUNT, len(targets))
            if not targets:
                return []

            timestamp = self._clock()
            notifications: list[ResourceNotification] = []
            for subscription in targets:
                notification = ResourceNotification(
                    params=UpdatedParams(
                        uri=uri,
                        subscription_id=subscription.subscription_id,
                        timestamp=timestamp,
                    ),
                )
                notifications.append(notification)
                try:
                    self._sink.deliver(subscription.client_id, notification)
                except Exception:
                    logger.exception(
                        "Delivery to %s failed for %s",
                        subscription.client_id,
                        subscription.subscription_id,
                    )
            logger.debug("Fan-out for %s reached %d subscriber(s)", uri, len(notifications))
            return notifications

    def simulate_update(self, uri: str) -> SimulatedUpdate:
        """Trigger a fan-out for *uri* and report it as updated regardless of subscribers."""
        notifications = self.notify_resource_updated(uri)
        timestamp = notifications[0].params.timestamp if notifications else self._clock()
        return SimulatedUpdate(uri=uri, timestamp=timestamp, notified=len(notifications))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _new_id(self, created_at: int) -> str:
        # Caller holds self._lock.  The millisecond part never decreases, so
        # only suffixes issued within the current millisecond need remembering.
        if created_at > self._id_millis:
            self._id_millis = created_at
            self._id_suffixes.clear()
        while True:
            suffix = uuid.uuid4().hex[:8]
            if suffix not in self._id_suffixes:
                self._id_suffixes.add(suffix)
                return f"sub_{self._id_millis}_{suffix}"
