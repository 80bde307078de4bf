"""
User service for registration, login and profile lookups.
"""
from typing import Optional
import logging

from fastapi import HTTPException, status

from app.core.cache import (
    cache_admin_user_list,
    cache_user_data,
    get_cached_admin_user_list,
    get_cached_user_data,
    invalidate_admin_user_list,
    invalidate_user_cache,
)
from app.core.document_store import DocumentRef, DocumentStore
from app.core.security import create_access_token, hash_password, verify_password
from app.repositories.flat_repo import FlatRepository
from app.repositories.user_repo import UserRepository
from app.repositories.base import to_response_dict
from app.schemas.user import (
    TokenResponse,
    UserListResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from app.utils.datetime_utils import to_iso_utc, utc_now

logger = logging.getLogger(__name__)

ADMIN_LIST_PAGE_SIZE = 50


class UserService:
    """Service for user-related business logic."""

    def __init__(self, store: DocumentStore):
        """Initialize user service."""
        self.store = store
        self.user_repo = UserRepository(store)
        self.flat_repo = FlatRepository(store)

    def _map_user_to_response(self, user: DocumentRef) -> UserResponse:
        return UserResponse.model_validate(to_response_dict(user))

    async def register(self, payload: UserRegister) -> UserResponse:
        """
        Register a new user.

        Raises:
            HTTPException: 409 if the email is already registered
        """
        email = payload.email.strip().lower()
        if await self.user_repo.get_by_email(email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="This email is not available"
            )

        user = await self.user_repo.create(
            email=email,
            password=hash_password(payload.password),
            firstName=payload.first_name,
            lastName=payload.last_name,
            birthDate=payload.birth_date.isoformat(),
            favoriteFlats=[],
            isAdmin=False,
            createdAt=to_iso_utc(utc_now()),
        )
        await invalidate_admin_user_list()

        logger.info(f"Registered user {user.id}")
        return self._map_user_to_response(user)

    async def authenticate(self, payload: UserLogin) -> TokenResponse:
        """
        Check credentials and issue an access token.

        Raises:
            HTTPException: 401 on unknown email or wrong password
        """
        user = await self.user_repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.data.get("password", "")):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        is_admin = bool(user.data.get("isAdmin", False))
        token = create_access_token(user.id, is_admin=is_admin)
        return TokenResponse(access_token=token, user_id=user.id, is_admin=is_admin)

    async def get_user(self, user_id: str) -> UserResponse:
        """
        Get a user profile, from cache when possible.

        Raises:
            HTTPException: 404 if the user does not exist
        """
        cached = await get_cached_user_data(user_id)
        if cached:
            return UserResponse.model_validate(cached)

        user = await self.user_repo.get(user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        response = self._map_user_to_response(user)
        await cache_user_data(user_id, response.model_dump(by_alias=True, mode="json"))
        return response

    async def list_users(self, limit: int = ADMIN_LIST_PAGE_SIZE, offset: int = 0) -> UserListResponse:
        """List users for the admin view. The first default page is cached."""
        cacheable = offset == 0 and limit == ADMIN_LIST_PAGE_SIZE
        if cacheable:
            cached = await get_cached_admin_user_list()
            if cached is not None:
                items = [UserResponse.model_validate(u) for u in cached]
                return UserListResponse(items=items, count=len(items))

        users = await self.user_repo.get_all(limit=limit, offset=offset)
        items = [self._map_user_to_response(u) for u in users]

        if cacheable:
            await cache_admin_user_list([u.model_dump(by_alias=True, mode="json") for u in items])
        return UserListResponse(items=items, count=len(items))

    async def set_favorite(self, user_id: str, flat_id: str, favorite: bool) -> UserResponse:
        """
        Add or remove a favourite flat.

        Raises:
            HTTPException: 404 if the flat does not exist
        """
        if favorite and not await self.flat_repo.exists(flat_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Flat not found"
            )

        user = await self.user_repo.set_favorite(user_id, flat_id, favorite)
        await invalidate_user_cache(user_id)
        return self._map_user_to_response(user)
