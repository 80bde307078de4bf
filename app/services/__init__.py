"""
Service layer exports.
Provides business logic for the application.
"""
from app.services.user_service import UserService
from app.services.flat_service import FlatService
from app.services.message_service import MessageService
from app.services.user_removal_service import UserRemovalService

__all__ = [
    "UserService",
    "FlatService",
    "MessageService",
    "UserRemovalService",
]
