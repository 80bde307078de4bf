"""
Repository layer exports.
Provides document store access for the application.
"""
from app.repositories.base import BaseRepository, to_response_dict
from app.repositories.user_repo import UserRepository
from app.repositories.flat_repo import FlatRepository
from app.repositories.message_repo import MessageRepository

__all__ = [
    "BaseRepository",
    "to_response_dict",
    "UserRepository",
    "FlatRepository",
    "MessageRepository",
]
