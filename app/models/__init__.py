"""
SQLAlchemy models for the RentEase server.

All models must be imported here for Alembic auto-generation to work.
"""

from app.models.base import Base, TimestampMixin, generate_document_id
from app.models.document import Document

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_document_id",
    "Document",
]
