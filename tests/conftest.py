"""
Pytest configuration and fixtures for tests.
Provides an in-memory recording store for the removal engine, a SQLite-backed
document store, seeded users/flats/messages and an HTTP client.
"""
import asyncio
import itertools
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Set, Tuple
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.document_store import (
    FLATS,
    MESSAGES,
    USERS,
    DocumentNotFound,
    DocumentRef,
    SQLDocumentStore,
    StoreError,
)
from app.core.security import create_access_token, hash_password
from app.models.base import Base


class RecordingStore:
    """
    In-memory document store that records every call.

    Every operation yields to the event loop once so concurrent callers
    interleave the way they would against a real store.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {USERS: {}, FLATS: {}, MESSAGES: {}}
        # (collection, id) of attempted and completed deletions, in order
        self.delete_calls: List[Tuple[str, str]] = []
        self.deleted: List[Tuple[str, str]] = []
        self.failing_deletes: Set[Tuple[str, str]] = set()
        self.failing_queries: Set[str] = set()
        self.on_delete: Optional[Callable[[str, str], None]] = None
        self.in_flight = 0
        self.max_in_flight = 0
        self._ids = itertools.count(1)

    def add(self, collection: str, document_id: str, **data) -> None:
        self.collections[collection][document_id] = dict(data)

    def ids(self, collection: str) -> Set[str]:
        return set(self.collections[collection])

    async def query_by_field(self, collection: str, field_name: str, value: Any) -> List[DocumentRef]:
        await asyncio.sleep(0)
        if collection in self.failing_queries:
            raise StoreError(collection, "query", RuntimeError("store unavailable"))
        return [
            DocumentRef(collection=collection, id=document_id, data=dict(data))
            for document_id, data in self.collections[collection].items()
            if data.get(field_name) == value
        ]

    async def delete_document(self, collection: str, document_id: str) -> None:
        self.delete_calls.append((collection, document_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.on_delete is not None:
                self.on_delete(collection, document_id)
            if (collection, document_id) in self.failing_deletes:
                raise StoreError(collection, "delete", RuntimeError("permission denied"))
            if document_id not in self.collections[collection]:
                raise DocumentNotFound(collection, document_id)
            del self.collections[collection][document_id]
            self.deleted.append((collection, document_id))
        finally:
            self.in_flight -= 1

    async def get_document(self, collection: str, document_id: str) -> Optional[DocumentRef]:
        await asyncio.sleep(0)
        data = self.collections[collection].get(document_id)
        if data is None:
            return None
        return DocumentRef(collection=collection, id=document_id, data=dict(data))

    async def create_document(
        self,
        collection: str,
        data: Dict[str, Any],
        document_id: Optional[str] = None,
    ) -> DocumentRef:
        document_id = document_id or f"{collection}-{next(self._ids)}"
        self.collections[collection][document_id] = dict(data)
        return DocumentRef(collection=collection, id=document_id, data=dict(data))

    async def update_document(self, collection: str, document_id: str, changes: Dict[str, Any]) -> DocumentRef:
        if document_id not in self.collections[collection]:
            raise DocumentNotFound(collection, document_id)
        self.collections[collection][document_id].update(changes)
        return DocumentRef(collection=collection, id=document_id, data=dict(self.collections[collection][document_id]))

    async def list_documents(self, collection: str, limit: int = 100, offset: int = 0) -> List[DocumentRef]:
        items = list(self.collections[collection].items())[offset:offset + limit]
        return [DocumentRef(collection=collection, id=document_id, data=dict(data)) for document_id, data in items]


@pytest.fixture
def store() -> RecordingStore:
    """Empty recording store."""
    return RecordingStore()


@pytest.fixture
def seeded_store(store: RecordingStore) -> RecordingStore:
    """
    User u1 owns flats f1 and f2.

    m1: sent by u1 on f1
    m2: sent by u2 on f1
    m3: sent by u1 on f2
    m4: sent by u2 on f3 (owned by u2, unrelated to u1)
    """
    store.add(USERS, "u1", email="owner@example.com")
    store.add(USERS, "u2", email="renter@example.com")
    store.add(FLATS, "f1", ownerID="u1", city="Lisbon")
    store.add(FLATS, "f2", ownerID="u1", city="Porto")
    store.add(FLATS, "f3", ownerID="u2", city="Braga")
    store.add(MESSAGES, "m1", senderId="u1", flatID="f1", content="hi")
    store.add(MESSAGES, "m2", senderId="u2", flatID="f1", content="is it free?")
    store.add(MESSAGES, "m3", senderId="u1", flatID="f2", content="hello")
    store.add(MESSAGES, "m4", senderId="u2", flatID="f3", content="mine")
    return store


@pytest.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a file-backed SQLite engine; every store call opens its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def sql_store(test_engine) -> SQLDocumentStore:
    """Document store over the test database."""
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    return SQLDocumentStore(session_factory)


@pytest.fixture(autouse=True)
def mock_connection_manager(mocker):
    """Socket.IO pushes are not exercised in tests."""
    from app.core.websocket import connection_manager

    return mocker.patch.object(connection_manager, "broadcast_user_removed", new=AsyncMock())


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Rate limiter storage is process-wide; start every test with a clean slate."""
    from app.api.v1 import auth, messages

    auth.limiter.reset()
    messages.limiter.reset()


async def _create_user(store, user_id: str, email: str, is_admin: bool = False) -> DocumentRef:
    return await store.create_document(
        USERS,
        {
            "email": email,
            "password": hash_password("secret123"),
            "firstName": "Test",
            "lastName": "User",
            "birthDate": "1990-05-17",
            "isAdmin": is_admin,
            "favoriteFlats": [],
        },
        document_id=user_id,
    )


@pytest.fixture
async def test_user(sql_store) -> DocumentRef:
    """Regular user who owns flats."""
    return await _create_user(sql_store, "owner-1", "owner@example.com")


@pytest.fixture
async def test_user_2(sql_store) -> DocumentRef:
    """Second regular user who writes to the first user's flats."""
    return await _create_user(sql_store, "renter-1", "renter@example.com")


@pytest.fixture
async def admin_user(sql_store) -> DocumentRef:
    """Administrator."""
    return await _create_user(sql_store, "admin-1", "admin@example.com", is_admin=True)


@pytest.fixture
async def test_flat(sql_store, test_user) -> DocumentRef:
    """Flat owned by test_user."""
    return await sql_store.create_document(
        FLATS,
        {
            "adTitle": "Sunny flat near the park",
            "city": "Lisbon",
            "streetName": "Rua Augusta",
            "streetNumber": 12,
            "areaSize": 54,
            "hasAC": True,
            "yearBuilt": 1998,
            "rentPrice": 950,
            "dateAvailable": "2026-11-01",
            "ownerID": test_user.id,
        },
        document_id="flat-1",
    )


@pytest.fixture
async def test_message(sql_store, test_user_2, test_flat) -> DocumentRef:
    """Message sent by test_user_2 about test_flat."""
    return await sql_store.create_document(
        MESSAGES,
        {"senderId": test_user_2.id, "flatID": test_flat.id, "content": "Is it still available?"},
        document_id="message-1",
    )


def _auth_headers(user: DocumentRef) -> Dict[str, str]:
    token = create_access_token(user.id, is_admin=bool(user.data.get("isAdmin")))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_user(sql_store):
    """Factory for extra users in the test database."""
    async def _create(user_id: str, email: str, is_admin: bool = False) -> DocumentRef:
        return await _create_user(sql_store, user_id, email, is_admin)
    return _create


@pytest.fixture
def headers_for():
    """Build bearer headers for any stored user."""
    return _auth_headers


@pytest.fixture
def auth_headers(test_user) -> Dict[str, str]:
    return _auth_headers(test_user)


@pytest.fixture
def auth_headers_2(test_user_2) -> Dict[str, str]:
    return _auth_headers(test_user_2)


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return _auth_headers(admin_user)


@pytest.fixture(scope="function")
async def client(sql_store) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client backed by the test document store."""
    from app.dependencies import get_document_store
    from app.main import fastapi_app

    fastapi_app.dependency_overrides[get_document_store] = lambda: sql_store

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()
