"""
Pydantic schema exports.
Provides request/response models for API endpoints.
"""
from app.schemas.user import (
    UserRegister,
    UserLogin,
    TokenResponse,
    UserResponse,
    UserListResponse,
)
from app.schemas.flat import (
    FlatCreate,
    FlatUpdate,
    FlatResponse,
    FlatListResponse,
)
from app.schemas.message import (
    MessageCreate,
    MessageResponse,
    MessageListResponse,
)
from app.schemas.cascade import (
    EntityType,
    EntityRef,
    DeleteFailure,
    DeletionSet,
    DeletionStage,
    DeletionReport,
    AbortReason,
    FailureReason,
    Outcome,
    OutcomeStatus,
)

__all__ = [
    # User schemas
    "UserRegister",
    "UserLogin",
    "TokenResponse",
    "UserResponse",
    "UserListResponse",
    # Flat schemas
    "FlatCreate",
    "FlatUpdate",
    "FlatResponse",
    "FlatListResponse",
    # Message schemas
    "MessageCreate",
    "MessageResponse",
    "MessageListResponse",
    # Cascade removal
    "EntityType",
    "EntityRef",
    "DeleteFailure",
    "DeletionSet",
    "DeletionStage",
    "DeletionReport",
    "AbortReason",
    "FailureReason",
    "Outcome",
    "OutcomeStatus",
]
