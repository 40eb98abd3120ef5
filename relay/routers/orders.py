"""
relay/routers/orders.py

Trigger endpoints for orders/{orderId} document events.
The event-delivery layer POSTs the document snapshots here; a push failure
returns 502 so that layer can redeliver.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from relay.schemas import DispatchResult, OrderCreatedEvent, OrderUpdatedEvent
from relay.services.dispatcher import NotificationDispatcher
from relay.services.notification import SinkFailure

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/triggers/orders", tags=["triggers"])


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """Dispatcher built in the application lifespan."""
    return request.app.state.dispatcher


def _summary(result: DispatchResult) -> dict[str, str | int]:
    status = "dispatched" if result.tokens else "skipped"
    return {"status": status, "tokens": len(result.tokens)}


@router.post("/{order_id}/created")
async def order_created(
    order_id: str,
    event: OrderCreatedEvent,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> dict[str, str | int]:
    """
    Handle a document-create event on orders/{order_id}.

    Flow:
    1. Resolve the owner's partner, or broadcast to everyone else
    2. Send "Nuevo pedido" to the resolved tokens
    3. Report "skipped" when no token was found, 502 when FCM rejects the send
    """
    logger.info("order_created_received", order_id=order_id)
    try:
        result = await dispatcher.on_order_created(order_id, event.value)
    except SinkFailure as exc:
        raise HTTPException(
            status_code=502, detail=f"push delivery failed: {exc}"
        ) from exc
    return _summary(result)


@router.post("/{order_id}/updated")
async def order_updated(
    order_id: str,
    event: OrderUpdatedEvent,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> dict[str, str | int]:
    """
    Handle a document-update event on orders/{order_id}.

    Flow:
    1. Resolve the recipient from the after snapshot, then display-name aliases
    2. Title the notice by the paid transition (realizado vs modificado)
    3. Report "skipped" when no token was found, 502 when FCM rejects the send
    """
    logger.info("order_updated_received", order_id=order_id)
    try:
        result = await dispatcher.on_order_updated(order_id, event.before, event.after)
    except SinkFailure as exc:
        raise HTTPException(
            status_code=502, detail=f"push delivery failed: {exc}"
        ) from exc
    return _summary(result)
