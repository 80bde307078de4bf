"""
Admin API endpoints.
Provides the user listing and cascading user removal.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.core.document_store import DocumentStore
from app.dependencies import get_admin_user, get_document_store, get_user_removal_service
from app.schemas.cascade import Outcome
from app.schemas.user import UserListResponse
from app.services.user_removal_service import UserRemovalService
from app.services.user_service import ADMIN_LIST_PAGE_SIZE, UserService

router = APIRouter()


@router.get("/users", response_model=UserListResponse)
async def list_users(
    limit: int = Query(ADMIN_LIST_PAGE_SIZE, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: dict = Depends(get_admin_user),
    store: DocumentStore = Depends(get_document_store)
):
    """List all users."""
    service = UserService(store)
    return await service.list_users(limit=limit, offset=offset)


@router.delete(
    "/users/{user_id}",
    response_model=Outcome,
    responses={409: {"model": Outcome, "description": "Removal incomplete, retry"}},
)
async def remove_user(
    user_id: str,
    admin: dict = Depends(get_admin_user),
    removal_service: UserRemovalService = Depends(get_user_removal_service)
):
    """
    Remove a user with every flat they own and every message that
    references the user or those flats.

    **Authentication**: Admin only

    **Returns**:
    - 200: Outcome with status "success". Removing an unknown user also succeeds.
    - 400: Admin tried to remove their own account
    - 409: Outcome with status "failure" and the entities that could not be
      deleted. Nothing left behind references a deleted entity; retrying is safe.
    """
    if user_id == admin["id"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot remove their own account"
        )

    outcome = await removal_service.remove_user_cascade(user_id)
    if not outcome.is_success:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=outcome.model_dump(mode="json")
        )
    return outcome
