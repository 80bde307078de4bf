"""
Tests for the SQL-backed document store.
"""
import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.core.document_store import (
    FLATS,
    MESSAGES,
    USERS,
    DocumentNotFound,
    StoreError,
    SQLDocumentStore,
)
from app.services.user_removal_service import UserRemovalService


@pytest.mark.asyncio
class TestSQLDocumentStore:
    """Test cases for SQLDocumentStore."""

    async def test_create_and_get(self, sql_store):
        created = await sql_store.create_document(FLATS, {"ownerID": "u1", "city": "Lisbon"})

        fetched = await sql_store.get_document(FLATS, created.id)

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.data == {"ownerID": "u1", "city": "Lisbon"}

    async def test_get_missing_returns_none(self, sql_store):
        assert await sql_store.get_document(USERS, "nobody") is None

    async def test_same_id_in_different_collections(self, sql_store):
        await sql_store.create_document(USERS, {"email": "a@example.com"}, document_id="x")
        await sql_store.create_document(FLATS, {"ownerID": "x"}, document_id="x")

        await sql_store.delete_document(FLATS, "x")

        assert await sql_store.get_document(USERS, "x") is not None
        assert await sql_store.get_document(FLATS, "x") is None

    async def test_query_by_string_field(self, sql_store):
        await sql_store.create_document(MESSAGES, {"senderId": "u1", "flatID": "f1"}, document_id="m1")
        await sql_store.create_document(MESSAGES, {"senderId": "u2", "flatID": "f1"}, document_id="m2")
        await sql_store.create_document(MESSAGES, {"senderId": "u1", "flatID": "f2"}, document_id="m3")

        refs = await sql_store.query_by_field(MESSAGES, "senderId", "u1")

        assert {ref.id for ref in refs} == {"m1", "m3"}
        assert all(ref.collection == MESSAGES for ref in refs)

    async def test_query_by_boolean_field(self, sql_store):
        await sql_store.create_document(USERS, {"isAdmin": True}, document_id="admin")
        await sql_store.create_document(USERS, {"isAdmin": False}, document_id="member")

        refs = await sql_store.query_by_field(USERS, "isAdmin", True)

        assert [ref.id for ref in refs] == ["admin"]

    async def test_query_without_matches_is_empty(self, sql_store):
        assert await sql_store.query_by_field(FLATS, "ownerID", "nobody") == []

    async def test_delete_missing_raises_not_found(self, sql_store):
        with pytest.raises(DocumentNotFound) as exc_info:
            await sql_store.delete_document(MESSAGES, "gone")

        assert exc_info.value.collection == MESSAGES
        assert exc_info.value.document_id == "gone"

    async def test_update_merges_fields(self, sql_store):
        await sql_store.create_document(FLATS, {"ownerID": "u1", "rentPrice": 900}, document_id="f1")

        updated = await sql_store.update_document(FLATS, "f1", {"rentPrice": 950, "hasAC": True})

        assert updated.data == {"ownerID": "u1", "rentPrice": 950, "hasAC": True}
        stored = await sql_store.get_document(FLATS, "f1")
        assert stored.data["rentPrice"] == 950

    async def test_update_missing_raises_not_found(self, sql_store):
        with pytest.raises(DocumentNotFound):
            await sql_store.update_document(FLATS, "missing", {"city": "Faro"})

    async def test_list_documents_paginates(self, sql_store):
        for i in range(5):
            await sql_store.create_document(FLATS, {"ownerID": "u1"}, document_id=f"f{i}")

        first_page = await sql_store.list_documents(FLATS, limit=3)
        second_page = await sql_store.list_documents(FLATS, limit=3, offset=3)

        assert len(first_page) == 3
        assert len(second_page) == 2
        assert not {r.id for r in first_page} & {r.id for r in second_page}

    async def test_concurrent_operations(self, sql_store):
        """Each call runs in its own session, so calls can be gathered."""
        await asyncio.gather(
            *(sql_store.create_document(MESSAGES, {"flatID": "f1"}, document_id=f"m{i}") for i in range(8))
        )

        await asyncio.gather(*(sql_store.delete_document(MESSAGES, f"m{i}") for i in range(8)))

        assert await sql_store.list_documents(MESSAGES) == []

    async def test_database_errors_become_store_errors(self, mocker):
        session = mocker.AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        factory = mocker.MagicMock()
        factory.return_value.__aenter__.return_value = session
        factory.return_value.__aexit__.return_value = False
        store = SQLDocumentStore(factory)

        with pytest.raises(StoreError) as exc_info:
            await store.query_by_field(FLATS, "ownerID", "u1")

        assert exc_info.value.collection == FLATS
        assert exc_info.value.operation == "query"
        assert isinstance(exc_info.value.cause, OperationalError)


@pytest.mark.asyncio
class TestCascadeAgainstSQLStore:
    """The removal pipeline running on the real store."""

    async def test_removes_user_flats_and_messages(self, sql_store):
        await sql_store.create_document(USERS, {"email": "owner@example.com"}, document_id="u1")
        await sql_store.create_document(USERS, {"email": "renter@example.com"}, document_id="u2")
        await sql_store.create_document(FLATS, {"ownerID": "u1"}, document_id="f1")
        await sql_store.create_document(FLATS, {"ownerID": "u1"}, document_id="f2")
        await sql_store.create_document(FLATS, {"ownerID": "u2"}, document_id="f3")
        await sql_store.create_document(MESSAGES, {"senderId": "u1", "flatID": "f1"}, document_id="m1")
        await sql_store.create_document(MESSAGES, {"senderId": "u2", "flatID": "f1"}, document_id="m2")
        await sql_store.create_document(MESSAGES, {"senderId": "u1", "flatID": "f2"}, document_id="m3")
        await sql_store.create_document(MESSAGES, {"senderId": "u2", "flatID": "f3"}, document_id="m4")
        service = UserRemovalService(sql_store, max_concurrency=4)

        outcome = await service.remove_user_cascade("u1")

        assert outcome.is_success
        assert [r.id for r in await sql_store.list_documents(USERS)] == ["u2"]
        assert [r.id for r in await sql_store.list_documents(FLATS)] == ["f3"]
        assert [r.id for r in await sql_store.list_documents(MESSAGES)] == ["m4"]

        again = await service.remove_user_cascade("u1")
        assert again.is_success
