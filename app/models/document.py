"""
Document model - the schema-less store behind users, flats and messages.

Every entity is one row keyed by (collection, id) with its fields held in a
JSON column. Documents reference each other only through id fields, with no
foreign keys, cascade or cross-collection transaction. Referential integrity
is kept by app.services.user_removal_service.
"""
from typing import Any, Dict

from sqlalchemy import JSON, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


class Document(Base, TimestampMixin):
    """A single JSON document in a named collection."""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        doc="Collection name (users, flats, messages)"
    )

    id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        doc="Opaque document identifier assigned at creation"
    )

    data: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Document fields"
    )

    __table_args__ = (
        Index("idx_documents_collection", "collection"),
    )

    def __repr__(self) -> str:
        return f"<Document({self.collection}/{self.id})>"
