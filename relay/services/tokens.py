"""
relay/services/tokens.py

Push token lookup over the Firestore token collections.
- DocumentStore: the two reads we need (get-by-key, get-all)
- FirestoreDocumentStore: DocumentStore backed by the async Firestore client
- TokenResolver: tries each collection in order (users, then profiles)
"""

from typing import Any, Optional, Protocol, Sequence

import structlog
from google.cloud.firestore import AsyncClient

from config import settings
from relay.constants import FCM_TOKEN_FIELD

logger = structlog.get_logger(__name__)


class DocumentStore(Protocol):
    async def get_document(
        self, collection: str, key: str
    ) -> Optional[dict[str, Any]]: ...

    async def list_documents(
        self, collection: str
    ) -> list[tuple[str, dict[str, Any]]]: ...


class FirestoreDocumentStore:
    """Read-only access to Firestore collections keyed by user id."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get_document(
        self, collection: str, key: str
    ) -> Optional[dict[str, Any]]:
        """Return the document data, or None when the document does not exist."""
        try:
            snapshot = await self._client.collection(collection).document(key).get()
        except Exception as exc:
            logger.error(
                "document_read_failed",
                collection=collection,
                key=key,
                error=str(exc),
            )
            raise
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    async def list_documents(
        self, collection: str
    ) -> list[tuple[str, dict[str, Any]]]:
        """Return (document id, data) for every document in the collection."""
        documents: list[tuple[str, dict[str, Any]]] = []
        try:
            async for snapshot in self._client.collection(collection).stream():
                documents.append((snapshot.id, snapshot.to_dict() or {}))
        except Exception as exc:
            logger.error(
                "collection_read_failed",
                collection=collection,
                error=str(exc),
            )
            raise
        return documents


def _extract_token(data: Optional[dict[str, Any]]) -> Optional[str]:
    if not data:
        return None
    token = data.get(FCM_TOKEN_FIELD)
    if isinstance(token, str) and token:
        return token
    return None


class TokenResolver:
    """Resolve push tokens from an ordered list of collections."""

    def __init__(self, store: DocumentStore, collections: Sequence[str]) -> None:
        if not collections:
            raise ValueError("TokenResolver needs at least one collection")
        self._store = store
        self._collections = tuple(collections)

    @classmethod
    def from_settings(cls, store: DocumentStore) -> "TokenResolver":
        return cls(store, (settings.users_collection, settings.profiles_collection))

    async def token_for(self, user_id: str) -> Optional[str]:
        """
        Return the user's token from the first collection that has one.

        A miss in every collection returns None; callers treat it as an
        empty target set rather than an error.
        """
        for collection in self._collections:
            token = _extract_token(await self._store.get_document(collection, user_id))
            if token is not None:
                logger.debug("token_found", user_id=user_id, collection=collection)
                return token
        logger.warning(
            "recipient_token_missing",
            user_id=user_id,
            collections=list(self._collections),
        )
        return None

    async def all_tokens(self, exclude_user_id: Optional[str] = None) -> list[str]:
        """Every distinct token across the collections, skipping exclude_user_id."""
        tokens: list[str] = []
        seen: set[str] = set()
        for collection in self._collections:
            for doc_id, data in await self._store.list_documents(collection):
                if exclude_user_id is not None and doc_id == exclude_user_id:
                    continue
                token = _extract_token(data)
                if token is None or token in seen:
                    continue
                seen.add(token)
                tokens.append(token)
        return tokens
