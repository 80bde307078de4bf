"""
Base repository with common CRUD operations.
All repositories should extend this class for document store access.
"""
from typing import Any, Dict, List, Optional

from app.core.document_store import DocumentRef, DocumentStore


class BaseRepository:
    """
    Base repository with common CRUD operations for one collection.

    Deletion is intentionally absent: removing users and flats must go
    through app.services.user_removal_service so dependents go with them.
    """

    collection: str = ""

    def __init__(self, store: DocumentStore):
        """
        Initialize repository.

        Args:
            store: Document store
        """
        self.store = store

    async def create(self, **fields: Any) -> DocumentRef:
        """
        Create a new document.

        Example:
            ```python
            flat = await flat_repo.create(ownerID=user_id, adTitle="Sunny loft")
            ```
        """
        return await self.store.create_document(self.collection, fields)

    async def get(self, id: str) -> Optional[DocumentRef]:
        """
        Get a document by ID.

        Returns:
            Document reference or None if not found
        """
        return await self.store.get_document(self.collection, id)

    async def get_all(self, limit: int = 100, offset: int = 0) -> List[DocumentRef]:
        """Get all documents with pagination."""
        return await self.store.list_documents(self.collection, limit=limit, offset=offset)

    async def update(self, id: str, **changes: Any) -> DocumentRef:
        """
        Update a document by ID.

        Raises:
            DocumentNotFound: If the document does not exist
        """
        return await self.store.update_document(self.collection, id, changes)

    async def filter_by(self, field_name: str, value: Any) -> List[DocumentRef]:
        """
        Documents whose field equals value.

        Example:
            ```python
            flats = await flat_repo.filter_by("ownerID", user_id)
            ```
        """
        return await self.store.query_by_field(self.collection, field_name, value)

    async def exists(self, id: str) -> bool:
        """Check if a document exists."""
        return await self.get(id) is not None


def to_response_dict(ref: DocumentRef) -> Dict[str, Any]:
    """Flatten a document reference into its fields plus its id."""
    return {**ref.data, "id": ref.id}
