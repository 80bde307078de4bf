"""
Flat service for listing, editing and removing flats.
"""
from datetime import date
from typing import Any, Dict, Optional
import logging

from fastapi import HTTPException, status

from app.core.document_store import DocumentRef, DocumentStore
from app.repositories.base import to_response_dict
from app.repositories.flat_repo import FlatRepository
from app.repositories.user_repo import UserRepository
from app.schemas.cascade import Outcome
from app.schemas.flat import FlatCreate, FlatListResponse, FlatResponse, FlatUpdate
from app.services.user_removal_service import UserRemovalService
from app.utils.datetime_utils import to_iso_utc, utc_now
from app.utils.validators import validate_edited_date_available

logger = logging.getLogger(__name__)


def _to_document_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Dates are stored as ISO strings."""
    if payload.get("dateAvailable") is not None:
        payload["dateAvailable"] = payload["dateAvailable"].isoformat()
    return payload


class FlatService:
    """Service for flat-related business logic."""

    def __init__(self, store: DocumentStore):
        """Initialize flat service."""
        self.store = store
        self.flat_repo = FlatRepository(store)
        self.user_repo = UserRepository(store)

    def _map_flat_to_response(self, flat: DocumentRef) -> FlatResponse:
        return FlatResponse.model_validate(to_response_dict(flat))

    async def _get_or_404(self, flat_id: str) -> DocumentRef:
        flat = await self.flat_repo.get(flat_id)
        if not flat:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Flat not found"
            )
        return flat

    @staticmethod
    def _check_can_modify(flat: DocumentRef, current_user: dict) -> None:
        if current_user.get("is_admin"):
            return
        if flat.data.get("ownerID") != current_user.get("id"):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the owner or an admin can modify this flat"
            )

    async def create_flat(self, owner_id: str, payload: FlatCreate) -> FlatResponse:
        """
        List a new flat for an owner.

        Raises:
            HTTPException: 404 if the owner does not exist
        """
        if not await self.user_repo.exists(owner_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Owner not found"
            )

        fields = _to_document_fields(payload.model_dump(by_alias=True))
        flat = await self.flat_repo.create(
            **fields,
            ownerID=owner_id,
            createdAt=to_iso_utc(utc_now()),
        )
        logger.info(f"User {owner_id} listed flat {flat.id}")
        return self._map_flat_to_response(flat)

    async def get_flat(self, flat_id: str) -> FlatResponse:
        """Get a flat by ID."""
        return self._map_flat_to_response(await self._get_or_404(flat_id))

    async def list_flats(
        self,
        owner_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> FlatListResponse:
        """List flats, optionally only those of one owner."""
        if owner_id:
            flats = await self.flat_repo.list_by_owner(owner_id)
            flats = flats[offset:offset + limit]
        else:
            flats = await self.flat_repo.get_all(limit=limit, offset=offset)

        items = [self._map_flat_to_response(f) for f in flats]
        return FlatListResponse(items=items, count=len(items))

    async def update_flat(self, flat_id: str, payload: FlatUpdate, current_user: dict) -> FlatResponse:
        """
        Edit a flat (owner or admin).

        Raises:
            HTTPException: 400 if nothing to update, 403 if not allowed, 404 if missing,
                422 if the new availability date is outside the allowed window
        """
        flat = await self._get_or_404(flat_id)
        self._check_can_modify(flat, current_user)

        if payload.date_available is not None:
            stored = flat.data.get("dateAvailable")
            try:
                validate_edited_date_available(
                    payload.date_available,
                    stored=date.fromisoformat(stored) if stored else None,
                )
            except ValueError as e:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=str(e)
                )

        changes = _to_document_fields(payload.model_dump(by_alias=True, exclude_none=True))
        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields to update"
            )

        changes["updatedAt"] = to_iso_utc(utc_now())
        updated = await self.flat_repo.update(flat_id, **changes)
        return self._map_flat_to_response(updated)

    async def remove_flat(
        self,
        flat_id: str,
        current_user: dict,
        removal_service: UserRemovalService,
    ) -> Outcome:
        """
        Remove a flat and the messages attached to it (owner or admin).

        Raises:
            HTTPException: 403 if not allowed, 404 if missing
        """
        flat = await self._get_or_404(flat_id)
        self._check_can_modify(flat, current_user)
        return await removal_service.remove_flat_cascade(flat_id)
