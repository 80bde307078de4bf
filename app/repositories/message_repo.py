"""
Message repository for document store operations.
"""
from typing import List

from app.core.document_store import MESSAGES, DocumentRef
from app.repositories.base import BaseRepository


class MessageRepository(BaseRepository):
    """Repository for message documents."""

    collection = MESSAGES

    async def list_by_flat(self, flat_id: str) -> List[DocumentRef]:
        """Messages attached to a flat, oldest first."""
        return await self.filter_by("flatID", flat_id)

    async def list_by_sender(self, sender_id: str) -> List[DocumentRef]:
        """Messages written by a user, oldest first."""
        return await self.filter_by("senderId", sender_id)
