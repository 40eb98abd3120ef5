"""
relay/schemas.py

Pydantic data models for the relay.
- Order: order document snapshot as written by the mobile client
- OrderCreatedEvent / OrderUpdatedEvent: trigger bodies for orders/{orderId}
- NotificationPayload: message handed to the push sink
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Order(BaseModel):
    """Snapshot of an orders/{orderId} document. Only the fields we read are typed."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    owner_name: Optional[str] = Field(default=None, alias="ownerName")
    # Raw document value: only a literal true counts as paid
    paid: Any = None

    @property
    def paid_absent(self) -> bool:
        return "paid" not in self.model_fields_set

    @property
    def owner_username(self) -> Optional[str]:
        """Identifier used for recipient resolution: display name first, then id."""
        return self.owner_name or self.owner_id or None

    @property
    def owner_document_id(self) -> Optional[str]:
        """Document id excluded from broadcasts: id first, then display name."""
        return self.owner_id or self.owner_name or None


class OrderCreatedEvent(BaseModel):
    """Body delivered by the trigger infrastructure on document create."""

    value: Order


class OrderUpdatedEvent(BaseModel):
    """Body delivered by the trigger infrastructure on document update."""

    before: Optional[Order] = None
    after: Optional[Order] = None


class Notification(BaseModel):
    title: str
    body: str


class NotificationData(BaseModel):
    type: str  # "order_created" | "order_updated"
    order_id: str = Field(serialization_alias="orderId")


class NotificationPayload(BaseModel):
    """Push payload: {notification: {title, body}, data: {type, orderId}}."""

    notification: Notification
    data: NotificationData

    def data_dict(self) -> dict[str, str]:
        """FCM data messages only carry string values."""
        return self.data.model_dump(by_alias=True)


class DispatchResult(BaseModel):
    """Outcome of one trigger invocation; tokens is empty when nothing was sent."""

    recipient: Optional[str]
    tokens: list[str]
    payload: NotificationPayload
