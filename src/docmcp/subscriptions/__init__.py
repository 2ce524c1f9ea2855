"""Subscription registry and notification delivery."""

from docmcp.subscriptions.models import (
    RESOURCE_UPDATED,
    ResourceNotification,
    SimulatedUpdate,
    Subscription,
    SubscriptionView,
    UnsubscribeOutcome,
    UpdatedParams,
)
from docmcp.subscriptions.registry import SubscriptionRegistry
from docmcp.subscriptions.sinks import CompositeSink, LoggingSink, NotificationSink, QueueSink

__all__ = [
    "RESOURCE_UPDATED",
    "CompositeSink",
    "LoggingSink",
    "NotificationSink",
    "QueueSink",
    "ResourceNotification",
    "SimulatedUpdate",
    "Subscription",
    "SubscriptionRegistry",
    "SubscriptionView",
    "UnsubscribeOutcome",
    "UpdatedParams",
]
