"""Subscription data models — registry entries and the notifications they produce."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

RESOURCE_UPDATED = "notifications/resources/updated"


class Subscription(BaseModel):
    """One client's interest in one resource URI."""

    model_config = {"frozen": True, "populate_by_name": True}

    subscription_id: str = Field(alias="subscriptionId")
    uri: str
    client_id: str = Field(alias="clientId")
    active: bool = True
    created_at: int = Field(alias="createdAt", description="Epoch milliseconds")

    def to_view(self) -> SubscriptionView:
        return SubscriptionView.model_validate(self.model_dump())

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class SubscriptionView(BaseModel):
    """Listing shape returned by ``listSubscriptions``."""

    model_config = {"populate_by_name": True}

    subscription_id: str = Field(alias="subscriptionId")
    uri: str
    client_id: str = Field(alias="clientId")
    active: bool
    created_at: int = Field(alias="createdAt")


class UpdatedParams(BaseModel):
    model_config = {"populate_by_name": True}

    uri: str
    subscription_id: str = Field(alias="subscriptionId")
    timestamp: int


class ResourceNotification(BaseModel):
    """Server-initiated ``notifications/resources/updated`` message (no id)."""

    jsonrpc: str = "2.0"
    method: str = RESOURCE_UPDATED
    params: UpdatedParams

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class UnsubscribeOutcome(BaseModel):
    """Result of :meth:`SubscriptionRegistry.unsubscribe`."""

    subscription_id: str
    status: Literal["unsubscribed", "not_found"]
    removed: Subscription | None = None

    @property
    def found(self) -> bool:
        return self.status == "unsubscribed"


class SimulatedUpdate(BaseModel):
    """Result of :meth:`SubscriptionRegistry.simulate_update`."""

    uri: str
    status: Literal["updated"] = "updated"
    timestamp: int
    notified: int = 0
