"""
Dependency injection for FastAPI routes.
Provides reusable dependencies for the document store, authentication and services.
"""
from typing import Optional
from fastapi import Depends, Header, HTTPException, status

from app.config import settings
from app.core.cache import evict_removed_user
from app.core.database import AsyncSessionLocal
from app.core.document_store import USERS, DocumentStore, SQLDocumentStore
from app.core.security import decode_token, token_from_authorization
from app.core.websocket import connection_manager
from app.services.user_removal_service import UserRemovalService

# Shared store handle; routes receive it through get_document_store so tests can override it
document_store = SQLDocumentStore(AsyncSessionLocal)


def get_document_store() -> DocumentStore:
    """Dependency returning the application's document store."""
    return document_store


async def get_current_user(
    authorization: Optional[str] = Header(None),
    store: DocumentStore = Depends(get_document_store),
) -> dict:
    """
    Dependency to get the current authenticated user.

    The token subject is looked up in the store on every request, so a
    removed user's still-valid token is rejected.

    Returns:
        Dictionary with the user's id, email and admin flag

    Raises:
        HTTPException: 401 if the token is missing, invalid or the user no longer exists

    Example:
        ```python
        @app.get("/protected")
        async def protected_route(current_user: dict = Depends(get_current_user)):
            return {"user": current_user["id"]}
        ```
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = token_from_authorization(authorization)
    payload = decode_token(token)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload - missing user ID",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await store.get_document(USERS, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "id": user.id,
        "email": user.data.get("email"),
        "is_admin": bool(user.data.get("isAdmin", False)),
    }


async def get_admin_user(
    current_user: dict = Depends(get_current_user)
) -> dict:
    """
    Dependency to verify the current user is an admin.

    Raises:
        HTTPException: 403 if user is not an admin
    """
    if not current_user.get("is_admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )

    return current_user


def get_user_removal_service(
    store: DocumentStore = Depends(get_document_store),
) -> UserRemovalService:
    """
    Dependency building the cascade removal service.

    Successful removals evict the user from the Redis cache and are pushed
    to connected admin dashboards.
    """
    return UserRemovalService(
        store,
        listeners=[evict_removed_user, connection_manager.broadcast_user_removed],
        max_concurrency=settings.cascade_max_concurrency,
        deadline_seconds=settings.cascade_deadline_seconds,
    )
