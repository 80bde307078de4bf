"""
User repository for document store operations.
Handles user lookup by email and favourite flats.
"""
from typing import Optional

from app.core.document_store import USERS, DocumentRef, DocumentNotFound
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Repository for user documents."""

    collection = USERS

    async def get_by_email(self, email: str) -> Optional[DocumentRef]:
        """
        Get user by email address (emails are stored lower-cased).

        Returns:
            User document or None
        """
        matches = await self.filter_by("email", email.strip().lower())
        return matches[0] if matches else None

    async def set_favorite(self, user_id: str, flat_id: str, favorite: bool) -> DocumentRef:
        """
        Add or remove a flat from the user's favourites.

        Raises:
            DocumentNotFound: If the user does not exist
        """
        user = await self.get(user_id)
        if user is None:
            raise DocumentNotFound(self.collection, user_id)

        favorites = [f for f in user.data.get("favoriteFlats", []) if f != flat_id]
        if favorite:
            favorites.append(flat_id)
        return await self.update(user_id, favoriteFlats=favorites)
