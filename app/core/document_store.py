"""
Document store access.

The rental data (users, flats, messages) lives in a schema-less document
store: one JSON document per entity, addressed by collection name and an
opaque string id. The store offers equality lookups and single-document
CRUD only. There are no foreign keys, no cascade-delete and no transaction
spanning several documents.
"""
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.base import generate_document_id
from app.models.document import Document

logger = logging.getLogger(__name__)

# Collection names
USERS = "users"
FLATS = "flats"
MESSAGES = "messages"


class StoreError(Exception):
    """A store operation failed for a reason other than a missing document."""

    def __init__(self, collection: str, operation: str, cause: BaseException):
        self.collection = collection
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} on '{collection}' failed: {cause}")


class DocumentNotFound(Exception):
    """The addressed document does not exist."""

    def __init__(self, collection: str, document_id: str):
        self.collection = collection
        self.document_id = document_id
        super().__init__(f"Document not found: {collection}/{document_id}")


@dataclass(frozen=True)
class DocumentRef:
    """Reference to a stored document with a snapshot of its fields."""

    collection: str
    id: str
    data: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


class DocumentStore(Protocol):
    """Capabilities the application needs from the document store."""

    async def query_by_field(self, collection: str, field_name: str, value: Any) -> List[DocumentRef]:
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        ...

    async def get_document(self, collection: str, document_id: str) -> Optional[DocumentRef]:
        ...

    async def create_document(
        self,
        collection: str,
        data: Dict[str, Any],
        document_id: Optional[str] = None,
    ) -> DocumentRef:
        ...

    async def update_document(self, collection: str, document_id: str, changes: Dict[str, Any]) -> DocumentRef:
        ...

    async def list_documents(self, collection: str, limit: int = 100, offset: int = 0) -> List[DocumentRef]:
        ...


def _to_ref(document: Document) -> DocumentRef:
    return DocumentRef(collection=document.collection, id=document.id, data=dict(document.data or {}))


class SQLDocumentStore:
    """
    Document store backed by a single SQL table of JSON documents.

    Every operation opens its own session and commits on its own, so calls
    can be issued concurrently from several tasks.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize the store.

        Args:
            session_factory: Async session factory bound to the engine
        """
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, collection: str, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Store {operation} on '{collection}' failed: {type(e).__name__}: {e}")
            raise StoreError(collection, operation, e) from e

    @staticmethod
    def _field_clause(field_name: str, value: Any):
        column = Document.data[field_name]
        if isinstance(value, bool):
            return column.as_boolean() == value
        if isinstance(value, int):
            return column.as_integer() == value
        if isinstance(value, float):
            return column.as_float() == value
        return column.as_string() == str(value)

    async def query_by_field(self, collection: str, field_name: str, value: Any) -> List[DocumentRef]:
        """
        Equality lookup on a top-level document field.

        Args:
            collection: Collection name
            field_name: Field to match
            value: Value the field must equal

        Returns:
            Matching documents (possibly empty)

        Raises:
            StoreError: If the query fails
        """
        async with self._session(collection, "query") as session:
            result = await session.execute(
                select(Document)
                .where(Document.collection == collection)
                .where(self._field_clause(field_name, value))
                .order_by(Document.created_at)
            )
            return [_to_ref(doc) for doc in result.scalars().all()]

    async def delete_document(self, collection: str, document_id: str) -> None:
        """
        Delete a single document.

        Raises:
            DocumentNotFound: If no document matched
            StoreError: If the delete fails
        """
        async with self._session(collection, "delete") as session:
            result = await session.execute(
                delete(Document)
                .where(Document.collection == collection)
                .where(Document.id == document_id)
            )
            await session.commit()
            if result.rowcount == 0:
                raise DocumentNotFound(collection, document_id)

    async def get_document(self, collection: str, document_id: str) -> Optional[DocumentRef]:
        """Fetch a document by id, or None if it does not exist."""
        async with self._session(collection, "get") as session:
            document = await session.get(Document, (collection, document_id))
            return _to_ref(document) if document else None

    async def create_document(
        self,
        collection: str,
        data: Dict[str, Any],
        document_id: Optional[str] = None,
    ) -> DocumentRef:
        """
        Create a document.

        Args:
            collection: Collection name
            data: Document fields
            document_id: Optional id (generated when omitted)

        Returns:
            Reference to the created document
        """
        async with self._session(collection, "create") as session:
            document = Document(
                collection=collection,
                id=document_id or generate_document_id(),
                data=dict(data),
            )
            session.add(document)
            await session.commit()
            return _to_ref(document)

    async def update_document(self, collection: str, document_id: str, changes: Dict[str, Any]) -> DocumentRef:
        """
        Shallow-merge changes into an existing document.

        Raises:
            DocumentNotFound: If the document does not exist
        """
        async with self._session(collection, "update") as session:
            document = await session.get(Document, (collection, document_id))
            if document is None:
                raise DocumentNotFound(collection, document_id)
            # Assign a new dict so the JSON column is flagged as modified
            document.data = {**(document.data or {}), **changes}
            await session.commit()
            return _to_ref(document)

    async def list_documents(self, collection: str, limit: int = 100, offset: int = 0) -> List[DocumentRef]:
        """List documents of a collection, oldest first."""
        async with self._session(collection, "list") as session:
            result = await session.execute(
                select(Document)
                .where(Document.collection == collection)
                .order_by(Document.created_at, Document.id)
                .limit(limit)
                .offset(offset)
            )
            return [_to_ref(doc) for doc in result.scalars().all()]
