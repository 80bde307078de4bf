"""
Flat repository for document store operations.
"""
from typing import List

from app.core.document_store import FLATS, DocumentRef
from app.repositories.base import BaseRepository


class FlatRepository(BaseRepository):
    """Repository for flat documents."""

    collection = FLATS

    async def list_by_owner(self, owner_id: str) -> List[DocumentRef]:
        """Flats owned by a user."""
        return await self.filter_by("ownerID", owner_id)
