"""
API v1 router exports.
Provides API endpoint routers.
"""
from app.api.v1 import admin, auth, flats, messages, users

__all__ = [
    "admin",
    "auth",
    "flats",
    "messages",
    "users",
]
