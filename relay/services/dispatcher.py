"""
relay/services/dispatcher.py

Order notification dispatch.
- on_order_created: notify the owner's partner (or everyone else) of a new order
- on_order_updated: same resolution plus display-name aliases; title depends
  on whether the order just became paid

Each call is independent and keeps no state between invocations.
"""

from typing import Optional

import structlog

from relay.constants import (
    ORDER_CREATED_BODY,
    ORDER_CREATED_TITLE,
    ORDER_CREATED_TYPE,
    ORDER_GENERIC_UPDATE_BODY,
    ORDER_GENERIC_UPDATE_TITLE,
    ORDER_MODIFIED_BODY,
    ORDER_MODIFIED_TITLE,
    ORDER_PAID_BODY,
    ORDER_PAID_TITLE,
    ORDER_UPDATED_TYPE,
    UNKNOWN_OWNER,
)
from relay.schemas import (
    DispatchResult,
    Notification,
    NotificationData,
    NotificationPayload,
    Order,
)
from relay.services.notification import PushSink
from relay.services.recipients import RecipientPolicy
from relay.services.tokens import TokenResolver

logger = structlog.get_logger(__name__)


def classify_update(
    before: Optional[Order], after: Optional[Order]
) -> tuple[str, str]:
    """
    Return (title, body) for an order update.

    Paid means before.paid was false or absent and after.paid is exactly true.
    Truthy non-boolean values and an explicit null do not qualify.
    """
    if before is None or after is None:
        return ORDER_GENERIC_UPDATE_TITLE, ORDER_GENERIC_UPDATE_BODY
    was_unpaid = before.paid is False or before.paid_absent
    if was_unpaid and after.paid is True:
        return ORDER_PAID_TITLE, ORDER_PAID_BODY
    return ORDER_MODIFIED_TITLE, ORDER_MODIFIED_BODY


class NotificationDispatcher:
    """Resolves recipients for order events and hands payloads to a push sink."""

    def __init__(
        self,
        policy: RecipientPolicy,
        tokens: TokenResolver,
        sink: PushSink,
    ) -> None:
        self._policy = policy
        self._tokens = tokens
        self._sink = sink

    async def _target_tokens(
        self, order: Order, recipient: Optional[str]
    ) -> list[str]:
        if recipient is not None:
            token = await self._tokens.token_for(recipient)
            return [token] if token is not None else []
        return await self._tokens.all_tokens(exclude_user_id=order.owner_document_id)

    async def _submit(
        self, tokens: list[str], payload: NotificationPayload
    ) -> None:
        if not tokens:
            logger.info(
                "notification_skipped_no_tokens",
                notification_type=payload.data.type,
                order_id=payload.data.order_id,
            )
            return
        await self._sink.send(tokens, payload)

    async def on_order_created(self, order_id: str, order: Order) -> DispatchResult:
        recipient = self._policy.resolve(order.owner_username)
        tokens = await self._target_tokens(order, recipient)

        owner = order.owner_username or UNKNOWN_OWNER
        payload = NotificationPayload(
            notification=Notification(
                title=ORDER_CREATED_TITLE,
                body=ORDER_CREATED_BODY.format(owner=owner),
            ),
            data=NotificationData(type=ORDER_CREATED_TYPE, order_id=order_id),
        )
        logger.info(
            "order_created_dispatch",
            order_id=order_id,
            owner=order.owner_username,
            recipient=recipient,
            token_count=len(tokens),
        )
        await self._submit(tokens, payload)
        return DispatchResult(recipient=recipient, tokens=tokens, payload=payload)

    async def on_order_updated(
        self,
        order_id: str,
        before: Optional[Order],
        after: Optional[Order],
    ) -> DispatchResult:
        """
        Dispatch an order update.

        Resolution runs on the after snapshot. A missing after snapshot is
        treated as an order with no owner, which broadcasts to every token.
        """
        current = after if after is not None else Order()
        recipient = self._policy.resolve(current.owner_username, use_aliases=True)
        tokens = await self._target_tokens(current, recipient)

        title, body = classify_update(before, after)
        payload = NotificationPayload(
            notification=Notification(title=title, body=body),
            data=NotificationData(type=ORDER_UPDATED_TYPE, order_id=order_id),
        )
        logger.info(
            "order_updated_dispatch",
            order_id=order_id,
            owner=current.owner_username,
            recipient=recipient,
            title=title,
            token_count=len(tokens),
        )
        await self._submit(tokens, payload)
        return DispatchResult(recipient=recipient, tokens=tokens, payload=payload)
