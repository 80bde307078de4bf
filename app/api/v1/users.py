"""
User API endpoints.
Provides profile lookups and favourite flats.
"""
from fastapi import APIRouter, Depends

from app.core.document_store import DocumentStore
from app.dependencies import get_current_user, get_document_store
from app.schemas.user import UserResponse
from app.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_endpoint(
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """Get the authenticated user's profile."""
    service = UserService(store)
    return await service.get_user(current_user["id"])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_by_id(
    user_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    Get a user profile by ID.

    **Errors**:
    - 404: User not found
    """
    service = UserService(store)
    return await service.get_user(user_id)


@router.put("/me/favorites/{flat_id}", response_model=UserResponse)
async def add_favorite_flat(
    flat_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """Mark a flat as favourite."""
    service = UserService(store)
    return await service.set_favorite(current_user["id"], flat_id, True)


@router.delete("/me/favorites/{flat_id}", response_model=UserResponse)
async def remove_favorite_flat(
    flat_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """Unmark a favourite flat."""
    service = UserService(store)
    return await service.set_favorite(current_user["id"], flat_id, False)
