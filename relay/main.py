"""
relay/main.py

FastAPI application entry point for the order notification relay.
Builds the Firestore store, FCM sink and dispatcher once per process.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI

from config import settings
from db.firestore import get_firestore_client, init_firebase_app
from relay.routers.orders import router as orders_router
from relay.services.dispatcher import NotificationDispatcher
from relay.services.notification import FcmPushSink
from relay.services.recipients import RecipientPolicy
from relay.services.tokens import FirestoreDocumentStore, TokenResolver

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level)
    ),
)

logger = structlog.get_logger(__name__)


def build_dispatcher() -> NotificationDispatcher:
    """Wire the dispatcher to Firestore and FCM using the current settings."""
    firebase_app = init_firebase_app()
    store = FirestoreDocumentStore(get_firestore_client())
    return NotificationDispatcher(
        policy=RecipientPolicy.from_settings(),
        tokens=TokenResolver.from_settings(store),
        sink=FcmPushSink(firebase_app),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle: startup and shutdown."""
    app.state.dispatcher = build_dispatcher()
    logger.info(
        "relay_starting",
        users_collection=settings.users_collection,
        profiles_collection=settings.profiles_collection,
        pairs=len(settings.recipient_pairs),
    )
    yield
    logger.info("relay_shutting_down")


app = FastAPI(
    title="Order Notification Relay",
    description="Forwards order create/update events as push notifications",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(orders_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check for the hosting platform."""
    return {"status": "ok"}
