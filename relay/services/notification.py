"""
relay/services/notification.py

Push sink for order notifications.
FcmPushSink delivers a payload to a list of device tokens through
firebase_admin.messaging. A rejected send is logged and raised as SinkFailure;
retries belong to whoever invoked the trigger.
"""

import asyncio
from typing import Optional, Protocol

import firebase_admin
import structlog
from firebase_admin import messaging

from relay.constants import FCM_MULTICAST_MAX_TOKENS
from relay.schemas import NotificationPayload

logger = structlog.get_logger(__name__)


class SinkFailure(Exception):
    """The push service rejected a send."""

    def __init__(self, message: str, token_count: int) -> None:
        super().__init__(message)
        self.token_count = token_count


class PushSink(Protocol):
    async def send(self, tokens: list[str], payload: NotificationPayload) -> None: ...


class FcmPushSink:
    """PushSink backed by FCM multicast messages."""

    def __init__(self, app: Optional[firebase_admin.App] = None) -> None:
        self._app = app

    def _build_message(
        self, tokens: list[str], payload: NotificationPayload
    ) -> messaging.MulticastMessage:
        return messaging.MulticastMessage(
            tokens=tokens,
            notification=messaging.Notification(
                title=payload.notification.title,
                body=payload.notification.body,
            ),
            data=payload.data_dict(),
        )

    async def send(self, tokens: list[str], payload: NotificationPayload) -> None:
        """
        Send payload to every token.

        Tokens beyond the multicast limit go out in further batches of the same
        call. Per-token delivery errors reported by FCM are logged only.
        """
        if not tokens:
            raise ValueError("send() requires at least one token")

        success_count = 0
        failure_count = 0
        try:
            for start in range(0, len(tokens), FCM_MULTICAST_MAX_TOKENS):
                batch = tokens[start : start + FCM_MULTICAST_MAX_TOKENS]
                response = await asyncio.to_thread(
                    messaging.send_each_for_multicast,
                    self._build_message(batch, payload),
                    app=self._app,
                )
                success_count += response.success_count
                failure_count += response.failure_count
        except Exception as exc:
            logger.error(
                "notification_send_failed",
                notification_type=payload.data.type,
                order_id=payload.data.order_id,
                token_count=len(tokens),
                error=str(exc),
            )
            raise SinkFailure(str(exc), token_count=len(tokens)) from exc

        log = logger.warning if failure_count else logger.info
        log(
            "notification_sent",
            notification_type=payload.data.type,
            order_id=payload.data.order_id,
            token_count=len(tokens),
            success_count=success_count,
            failure_count=failure_count,
        )
