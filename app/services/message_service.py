"""
Message service: messages users send about flats.
"""
from typing import List
import logging

from fastapi import HTTPException, status

from app.core.document_store import DocumentRef, DocumentStore
from app.repositories.base import to_response_dict
from app.repositories.flat_repo import FlatRepository
from app.repositories.message_repo import MessageRepository
from app.repositories.user_repo import UserRepository
from app.schemas.message import MessageCreate, MessageListResponse, MessageResponse
from app.utils.datetime_utils import to_iso_utc, utc_now

logger = logging.getLogger(__name__)


class MessageService:
    """Service for message-related business logic."""

    def __init__(self, store: DocumentStore):
        """Initialize message service."""
        self.store = store
        self.message_repo = MessageRepository(store)
        self.flat_repo = FlatRepository(store)
        self.user_repo = UserRepository(store)

    def _map_message_to_response(self, message: DocumentRef) -> MessageResponse:
        return MessageResponse.model_validate(to_response_dict(message))

    async def send_message(self, sender_id: str, payload: MessageCreate) -> MessageResponse:
        """
        Send a message about a flat.

        Both the sender and the flat are checked right before writing, so a
        message is never created for a user or flat that is already gone.

        Raises:
            HTTPException: 404 if the sender or the flat does not exist
        """
        if not await self.user_repo.exists(sender_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Sender not found"
            )
        if not await self.flat_repo.exists(payload.flat_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Flat not found"
            )

        message = await self.message_repo.create(
            senderId=sender_id,
            flatID=payload.flat_id,
            content=payload.content,
            createdAt=to_iso_utc(utc_now()),
        )
        logger.info(f"User {sender_id} sent message {message.id} about flat {payload.flat_id}")
        return self._map_message_to_response(message)

    async def list_flat_messages(self, flat_id: str, current_user: dict) -> MessageListResponse:
        """
        Messages about a flat.

        The owner and admins see every message; anyone else only sees the
        messages they sent.

        Raises:
            HTTPException: 404 if the flat does not exist
        """
        flat = await self.flat_repo.get(flat_id)
        if not flat:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Flat not found"
            )

        messages: List[DocumentRef] = await self.message_repo.list_by_flat(flat_id)
        is_owner = flat.data.get("ownerID") == current_user.get("id")
        if not (is_owner or current_user.get("is_admin")):
            messages = [m for m in messages if m.data.get("senderId") == current_user.get("id")]

        items = [self._map_message_to_response(m) for m in messages]
        return MessageListResponse(items=items, count=len(items))
