"""
tests/fixtures.py

Shared test data and helper functions for constructing orders and dispatchers.
All tests must use these fixtures instead of hardcoding test values.
"""

from typing import Any, Optional
from unittest.mock import AsyncMock

from relay.schemas import Order
from relay.services.dispatcher import NotificationDispatcher
from relay.services.recipients import RecipientPolicy
from relay.services.tokens import TokenResolver

# ── Test users ──────────────────────────────────────────────

USER_A: str = "david1720"
USER_B: str = "maria1720"
ALIAS_A: str = "Esteban"
ALIAS_B: str = "Luisa"
TEST_ORDER_ID: str = "order_001"

TEST_PAIRS: dict[str, str] = {USER_A: USER_B}
TEST_ALIASES: dict[str, str] = {ALIAS_A: USER_A, ALIAS_B: USER_B}

# Marks a field as missing from the document, as opposed to an explicit null
ABSENT: Any = object()


class FakeDocumentStore:
    """In-memory DocumentStore: {collection: {doc_id: data}}."""

    def __init__(self, collections: Optional[dict[str, dict[str, dict]]] = None) -> None:
        self.collections = collections or {}
        self.get_calls: list[tuple[str, str]] = []

    async def get_document(self, collection: str, key: str) -> Optional[dict[str, Any]]:
        self.get_calls.append((collection, key))
        return self.collections.get(collection, {}).get(key)

    async def list_documents(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        return list(self.collections.get(collection, {}).items())


def build_store(
    users: Optional[dict[str, dict]] = None,
    profiles: Optional[dict[str, dict]] = None,
) -> FakeDocumentStore:
    """Build a store with the users and profiles token collections."""
    return FakeDocumentStore({"users": users or {}, "profiles": profiles or {}})


def build_order(
    owner_name: Optional[str] = None,
    owner_id: Optional[str] = None,
    paid: Any = ABSENT,
) -> Order:
    """Build an Order the way the client writes it (camelCase fields)."""
    data: dict[str, Any] = {}
    if owner_name is not None:
        data["ownerName"] = owner_name
    if owner_id is not None:
        data["ownerId"] = owner_id
    if paid is not ABSENT:
        data["paid"] = paid
    return Order.model_validate(data)


def build_policy() -> RecipientPolicy:
    return RecipientPolicy(TEST_PAIRS, TEST_ALIASES)


def build_dispatcher(
    store: Optional[FakeDocumentStore] = None,
    sink: Optional[AsyncMock] = None,
) -> tuple[NotificationDispatcher, AsyncMock]:
    """Build a dispatcher over a fake store; returns it with its mocked sink."""
    sink = sink or AsyncMock()
    dispatcher = NotificationDispatcher(
        policy=build_policy(),
        tokens=TokenResolver(store or build_store(), ("users", "profiles")),
        sink=sink,
    )
    return dispatcher, sink
