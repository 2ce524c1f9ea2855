"""Tests for the SubscriptionRegistry."""

from __future__ import annotations

import logging
import re
from unittest.mock import MagicMock

import pytest

from docmcp.subscriptions import (
    RESOURCE_UPDATED,
    QueueSink,
    SubscriptionRegistry,
)

ID_PATTERN = re.compile(r"^sub_\d+_[0-9a-f]{8}$")


@pytest.fixture
def sink() -> QueueSink:
    return QueueSink()


@pytest.fixture
def registry(sink: QueueSink) -> SubscriptionRegistry:
    return SubscriptionRegistry(sink=sink, clock=lambda: 1_700_000_000_000)


class TestSubscribe:
    def test_returns_formatted_id(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        assert ID_PATTERN.match(sub_id)
        assert sub_id.startswith("sub_1700000000000_")

    def test_updates_both_maps(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        details = registry.get_details(sub_id)
        assert details is not None
        assert details.uri == "mcp://logs/debug"
        assert details.client_id == "client-A"
        assert details.active is True
        assert details.created_at == 1_700_000_000_000
        assert registry.subscribers_of("mcp://logs/debug") == {sub_id}

    def test_same_pair_twice_creates_two_subscriptions(self, registry: SubscriptionRegistry) -> None:
        first = registry.subscribe("mcp://logs/info", "client-A")
        second = registry.subscribe("mcp://logs/info", "client-A")
        assert first != second
        assert len(registry) == 2
        assert registry.subscribers_of("mcp://logs/info") == {first, second}

    def test_unknown_uri_is_accepted(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://not/in/catalog", "client-A")
        assert registry.get_details(sub_id) is not None

    def test_ids_unique_under_frozen_clock(self, registry: SubscriptionRegistry) -> None:
        ids = {registry.subscribe("mcp://logs/all", f"c{i}") for i in range(500)}
        assert len(ids) == 500


class TestUnsubscribe:
    def test_removes_from_both_maps(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        outcome = registry.unsubscribe(sub_id)
        assert outcome.status == "unsubscribed"
        assert outcome.found
        assert outcome.removed is not None
        assert outcome.removed.uri == "mcp://logs/debug"
        assert registry.get_details(sub_id) is None
        assert registry.subscribers_of("mcp://logs/debug") == set()

    def test_drops_empty_uri_entry(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        registry.unsubscribe(sub_id)
        assert "mcp://logs/debug" not in registry.subscribed_uris()

    def test_keeps_uri_entry_with_remaining_subscribers(self, registry: SubscriptionRegistry) -> None:
        first = registry.subscribe("mcp://logs/debug", "client-A")
        second = registry.subscribe("mcp://logs/debug", "client-B")
        registry.unsubscribe(first)
        assert registry.subscribers_of("mcp://logs/debug") == {second}

    def test_unknown_id_is_not_found(self, registry: SubscriptionRegistry) -> None:
        outcome = registry.unsubscribe("sub_0_deadbeef")
        assert outcome.status == "not_found"
        assert not outcome.found
        assert outcome.removed is None

    def test_second_unsubscribe_is_not_found(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        registry.unsubscribe(sub_id)
        assert registry.unsubscribe(sub_id).status == "not_found"

    def test_removed_id_is_never_reissued(self, registry: SubscriptionRegistry) -> None:
        first = registry.subscribe("mcp://logs/debug", "client-A")
        registry.unsubscribe(first)
        later = {registry.subscribe("mcp://logs/debug", "client-A") for _ in range(200)}
        assert first not in later

    def test_id_bookkeeping_does_not_grow_with_churn(self) -> None:
        ticks = iter(range(1_700_000_000_000, 1_700_000_010_000))
        registry = SubscriptionRegistry(clock=lambda: next(ticks))
        seen: set[str] = set()
        for _ in range(5000):
            sub_id = registry.subscribe("mcp://logs/debug", "client-A")
            seen.add(sub_id)
            registry.unsubscribe(sub_id)
        assert len(seen) == 5000
        assert len(registry) == 0
        assert len(registry._id_suffixes) == 1

    def test_clock_stepping_back_never_repeats_an_id(self) -> None:
        readings = iter([2_000, 2_000, 1_000, 1_000, 2_000, 3_000])
        registry = SubscriptionRegistry(clock=lambda: next(readings))
        ids = [registry.subscribe("mcp://logs/debug", "client-A") for _ in range(6)]
        assert len(set(ids)) == 6
        millis = [int(sub_id.split("_")[1]) for sub_id in ids]
        assert millis == [2_000, 2_000, 2_000, 2_000, 2_000, 3_000]
        details = registry.get_details(ids[2])
        assert details is not None
        assert details.created_at == 1_000


class TestQueries:
    def test_list_subscriptions(self, registry: SubscriptionRegistry) -> None:
        a = registry.subscribe("mcp://logs/debug", "client-A")
        b = registry.subscribe("mcp://logs/info", "client-B")
        listed = {s.subscription_id for s in registry.list_subscriptions()}
        assert listed == {a, b}

    def test_list_is_a_snapshot(self, registry: SubscriptionRegistry) -> None:
        registry.subscribe("mcp://logs/debug", "client-A")
        snapshot = registry.list_subscriptions()
        registry.subscribe("mcp://logs/info", "client-B")
        assert len(snapshot) == 1

    def test_view_uses_wire_names(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        view = registry.list_subscriptions()[0].to_view().model_dump(by_alias=True)
        assert view == {
            "subscriptionId": sub_id,
            "uri": "mcp://logs/debug",
            "clientId": "client-A",
            "active": True,
            "createdAt": 1_700_000_000_000,
        }

    def test_get_details_unknown(self, registry: SubscriptionRegistry) -> None:
        assert registry.get_details("nope") is None

    def test_empty_registry(self, registry: SubscriptionRegistry) -> None:
        assert len(registry) == 0
        assert registry.list_subscriptions() == []
        assert registry.subscribed_uris() == set()


class TestNotify:
    def test_one_notification_per_subscriber(self, registry: SubscriptionRegistry, sink: QueueSink) -> None:
        a = registry.subscribe("mcp://logs/debug", "client-A")
        b = registry.subscribe("mcp://logs/debug", "client-B")
        registry.subscribe("mcp://logs/info", "client-C")

        notifications = registry.notify_resource_updated("mcp://logs/debug")

        assert {n.params.subscription_id for n in notifications} == {a, b}
        assert all(n.method == RESOURCE_UPDATED for n in notifications)
        assert all(n.params.uri == "mcp://logs/debug" for n in notifications)
        assert len(sink.drain("client-A")) == 1
        assert len(sink.drain("client-B")) == 1
        assert sink.drain("client-C") == []

    def test_shared_timestamp(self, registry: SubscriptionRegistry) -> None:
        registry.subscribe("mcp://logs/debug", "client-A")
        registry.subscribe("mcp://logs/debug", "client-B")
        timestamps = {n.params.timestamp for n in registry.notify_resource_updated("mcp://logs/debug")}
        assert timestamps == {1_700_000_000_000}

    def test_no_subscribers_is_silent(self, registry: SubscriptionRegistry, sink: QueueSink) -> None:
        assert registry.notify_resource_updated("mcp://nobody/watches") == []
        assert len(registry) == 0
        assert registry.subscribed_uris() == set()

    def test_unsubscribed_client_not_notified(self, registry: SubscriptionRegistry, sink: QueueSink) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        registry.unsubscribe(sub_id)
        assert registry.notify_resource_updated("mcp://logs/debug") == []
        assert sink.drain("client-A") == []

    def test_failing_sink_does_not_stop_fanout(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = MagicMock()
        sink.deliver.side_effect = [RuntimeError("pipe closed"), None]
        registry = SubscriptionRegistry(sink=sink)
        registry.subscribe("mcp://logs/debug", "client-A")
        registry.subscribe("mcp://logs/debug", "client-B")

        with caplog.at_level(logging.ERROR, logger="docmcp.subscriptions.registry"):
            notifications = registry.notify_resource_updated("mcp://logs/debug")

        assert len(notifications) == 2
        assert sink.deliver.call_count == 2
        assert "Delivery to" in caplog.text

    def test_wire_shape(self, registry: SubscriptionRegistry) -> None:
        sub_id = registry.subscribe("mcp://logs/debug", "client-A")
        wire = registry.notify_resource_updated("mcp://logs/debug")[0].to_wire()
        assert wire == {
            "jsonrpc": "2.0",
            "method": "notifications/resources/updated",
            "params": {"uri": "mcp://logs/debug", "subscriptionId": sub_id, "timestamp": 1_700_000_000_000},
        }


class TestSimulateUpdate:
    def test_reports_updated_without_subscribers(self, registry: SubscriptionRegistry) -> None:
        update = registry.simulate_update("mcp://logs/error")
        assert update.status == "updated"
        assert update.uri == "mcp://logs/error"
        assert update.notified == 0
        assert update.timestamp == 1_700_000_000_000

    def test_notifies_subscribers(self, registry: SubscriptionRegistry, sink: QueueSink) -> None:
        registry.subscribe("mcp://logs/error", "client-A")
        assert registry.simulate_update("mcp://logs/error").notified == 1
        assert len(sink.drain("client-A")) == 1


class TestSink:
    def test_default_sink_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = SubscriptionRegistry()
        registry.subscribe("mcp://logs/info", "client-A")
        with caplog.at_level(logging.INFO, logger="docmcp.subscriptions.sinks"):
            registry.notify_resource_updated("mcp://logs/info")
        assert "Notify client-A" in caplog.text

    def test_set_sink(self, registry: SubscriptionRegistry) -> None:
        replacement = QueueSink()
        registry.set_sink(replacement)
        assert registry.sink is replacement
        registry.subscribe("mcp://logs/info", "client-A")
        registry.notify_resource_updated("mcp://logs/info")
        assert len(replacement.drain("client-A")) == 1
