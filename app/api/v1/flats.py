"""
Flat API endpoints.
Provides listing, editing and removal of flats and their messages.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.core.document_store import DocumentStore
from app.dependencies import get_current_user, get_document_store, get_user_removal_service
from app.schemas.cascade import Outcome
from app.schemas.flat import FlatCreate, FlatListResponse, FlatResponse, FlatUpdate
from app.schemas.message import MessageListResponse
from app.services.flat_service import FlatService
from app.services.message_service import MessageService
from app.services.user_removal_service import UserRemovalService

router = APIRouter()


@router.post("/", response_model=FlatResponse, status_code=status.HTTP_201_CREATED)
async def create_flat(
    payload: FlatCreate,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """List a new flat owned by the authenticated user."""
    service = FlatService(store)
    return await service.create_flat(current_user["id"], payload)


@router.get("/", response_model=FlatListResponse)
async def list_flats(
    owner_id: Optional[str] = Query(None, alias="ownerID"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """List flats, optionally filtered by owner."""
    service = FlatService(store)
    return await service.list_flats(owner_id=owner_id, limit=limit, offset=offset)


@router.get("/{flat_id}", response_model=FlatResponse)
async def get_flat(
    flat_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """Get a flat by ID."""
    service = FlatService(store)
    return await service.get_flat(flat_id)


@router.patch("/{flat_id}", response_model=FlatResponse)
async def update_flat(
    flat_id: str,
    payload: FlatUpdate,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    Edit a flat.

    **Errors**:
    - 403: Not the owner and not an admin
    - 404: Flat not found
    """
    service = FlatService(store)
    return await service.update_flat(flat_id, payload, current_user)


@router.delete("/{flat_id}", response_model=Outcome)
async def remove_flat(
    flat_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
    removal_service: UserRemovalService = Depends(get_user_removal_service)
):
    """
    Remove a flat together with every message about it.

    Returns 200 with the outcome when everything was removed, 409 with the
    failed entities when the removal is incomplete and should be retried.
    """
    service = FlatService(store)
    outcome = await service.remove_flat(flat_id, current_user, removal_service)
    if not outcome.is_success:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=outcome.model_dump(mode="json")
        )
    return outcome


@router.get("/{flat_id}/messages", response_model=MessageListResponse)
async def list_flat_messages(
    flat_id: str,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """Messages about a flat (all of them for the owner and admins)."""
    service = MessageService(store)
    return await service.list_flat_messages(flat_id, current_user)
