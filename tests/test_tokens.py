"""
tests/test_tokens.py

Unit tests for relay/services/tokens.py.
The Firestore client is mocked; TokenResolver runs against the in-memory store.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from relay.services.tokens import FirestoreDocumentStore, TokenResolver
from tests.fixtures import USER_A, USER_B, build_store


def _resolver(store) -> TokenResolver:
    return TokenResolver(store, ("users", "profiles"))


@pytest.mark.asyncio
async def test_token_from_users_takes_precedence() -> None:
    """The users collection is consulted first and wins."""
    store = build_store(
        users={USER_B: {"fcmToken": "T_users"}},
        profiles={USER_B: {"fcmToken": "T_profiles"}},
    )

    assert await _resolver(store).token_for(USER_B) == "T_users"
    assert store.get_calls == [("users", USER_B)]


@pytest.mark.asyncio
async def test_token_falls_back_to_profiles() -> None:
    """A users document without a token falls back to profiles."""
    store = build_store(
        users={USER_B: {"name": "Maria"}},
        profiles={USER_B: {"fcmToken": "T_profiles"}},
    )

    assert await _resolver(store).token_for(USER_B) == "T_profiles"


@pytest.mark.asyncio
async def test_token_missing_everywhere_returns_none() -> None:
    """Empty tokens count as missing."""
    store = build_store(users={USER_B: {"fcmToken": ""}})

    assert await _resolver(store).token_for(USER_B) is None


@pytest.mark.asyncio
async def test_all_tokens_excludes_owner_and_deduplicates() -> None:
    """Broadcast tokens skip the owner and repeat no token."""
    store = build_store(
        users={
            USER_A: {"fcmToken": "TA"},
            USER_B: {"fcmToken": "TB"},
            "carlos": {"fcmToken": "TC"},
        },
        profiles={
            USER_B: {"fcmToken": "TB"},
            "carlos": {"fcmToken": "TC2"},
            "ana": {},
        },
    )

    tokens = await _resolver(store).all_tokens(exclude_user_id=USER_A)

    assert tokens == ["TB", "TC", "TC2"]


@pytest.mark.asyncio
async def test_all_tokens_excludes_owner_in_profiles_too() -> None:
    """The owner is excluded from both collections."""
    store = build_store(
        users={"carlos": {"fcmToken": "TC"}},
        profiles={"carlos": {"fcmToken": "TC_profile"}, USER_B: {"fcmToken": "TB"}},
    )

    tokens = await _resolver(store).all_tokens(exclude_user_id="carlos")

    assert tokens == ["TB"]


def test_resolver_requires_collections() -> None:
    """A resolver without collections is a configuration error."""
    with pytest.raises(ValueError):
        TokenResolver(build_store(), ())


def _mock_firestore_client(snapshot=None, stream_snapshots=(), error=None):
    client = MagicMock()
    document_ref = MagicMock()
    if error is not None:
        document_ref.get = AsyncMock(side_effect=error)
    else:
        document_ref.get = AsyncMock(return_value=snapshot)
    collection_ref = MagicMock()
    collection_ref.document.return_value = document_ref

    async def _stream():
        for item in stream_snapshots:
            yield item

    collection_ref.stream.side_effect = lambda: _stream()
    client.collection.return_value = collection_ref
    return client


@pytest.mark.asyncio
async def test_firestore_store_get_document() -> None:
    """get_document reads collection/document and returns its data."""
    snapshot = MagicMock(exists=True)
    snapshot.to_dict.return_value = {"fcmToken": "T1"}
    client = _mock_firestore_client(snapshot=snapshot)

    data = await FirestoreDocumentStore(client).get_document("users", USER_B)

    assert data == {"fcmToken": "T1"}
    client.collection.assert_called_with("users")
    client.collection.return_value.document.assert_called_with(USER_B)


@pytest.mark.asyncio
async def test_firestore_store_missing_document() -> None:
    """A non-existent document reads as None."""
    client = _mock_firestore_client(snapshot=MagicMock(exists=False))

    assert await FirestoreDocumentStore(client).get_document("users", "nobody") is None


@pytest.mark.asyncio
async def test_firestore_store_list_documents() -> None:
    """list_documents streams ids with data, empty dict for no data."""
    first = MagicMock(id=USER_A)
    first.to_dict.return_value = {"fcmToken": "TA"}
    second = MagicMock(id=USER_B)
    second.to_dict.return_value = None
    client = _mock_firestore_client(stream_snapshots=[first, second])

    documents = await FirestoreDocumentStore(client).list_documents("profiles")

    assert documents == [(USER_A, {"fcmToken": "TA"}), (USER_B, {})]


@pytest.mark.asyncio
async def test_firestore_store_propagates_read_errors() -> None:
    """Firestore read errors are logged and re-raised."""
    client = _mock_firestore_client(error=RuntimeError("unavailable"))

    with pytest.raises(RuntimeError):
        await FirestoreDocumentStore(client).get_document("users", USER_B)
