"""
Message API endpoints.
"""
from fastapi import APIRouter, Depends, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.document_store import DocumentStore
from app.dependencies import get_current_user, get_document_store
from app.schemas.message import MessageCreate, MessageResponse
from app.services.message_service import MessageService

router = APIRouter()

limiter = Limiter(key_func=get_remote_address)


@router.post(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message about a flat",
)
@limiter.limit("30/minute")  # Max 30 messages per minute per client
async def send_message(
    request: Request,
    payload: MessageCreate,
    current_user: dict = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    Send a message about a flat.

    - **flatID**: ID of the flat the message is about
    - **content**: Message text
    """
    service = MessageService(store)
    return await service.send_message(current_user["id"], payload)
