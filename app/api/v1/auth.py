"""
Authentication API endpoints.
Provides registration and email/password login.
"""
from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.document_store import DocumentStore
from app.dependencies import get_document_store
from app.schemas.user import TokenResponse, UserLogin, UserRegister, UserResponse
from app.services.user_service import UserService

router = APIRouter()

limiter = Limiter(key_func=get_remote_address)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
@limiter.limit("20/minute")
async def register(
    request: Request,
    payload: UserRegister,
    store: DocumentStore = Depends(get_document_store)
):
    """
    Register a new account.

    **Errors**:
    - 409: Email already registered
    - 422: Validation failed (weak password, age outside 18-120, ...)
    """
    service = UserService(store)
    return await service.register(payload)


@router.post("/login", response_model=TokenResponse, summary="Log in with email and password")
@limiter.limit("20/minute")
async def login(
    request: Request,
    payload: UserLogin,
    store: DocumentStore = Depends(get_document_store)
):
    """
    Exchange email and password for a bearer access token.

    **Errors**:
    - 401: Invalid email or password
    """
    service = UserService(store)
    return await service.authenticate(payload)
