"""
Schemas for cascading user removal.

A removal runs in three steps: the deletion set is resolved from the store,
deleted stage by stage (messages, flats, user), and the resulting report is
turned into a single outcome for the caller.
"""
import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, enum.Enum):
    """Kinds of entity a cascade can remove."""
    USER = "user"
    FLAT = "flat"
    MESSAGE = "message"


class DeletionStage(str, enum.Enum):
    """Cascade stages, in execution order."""
    MESSAGES = "messages"
    FLATS = "flats"
    USER = "user"


class AbortReason(str, enum.Enum):
    """Why a cascade stopped before its last stage without a delete failure."""
    DEADLINE_EXCEEDED = "deadline_exceeded"
    CANCELLED = "cancelled"


class OutcomeStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class FailureReason(str, enum.Enum):
    """Reason attached to a failed outcome."""
    QUERY_FAILURE = "query_failure"
    PARTIAL_CASCADE_FAILURE = "partial_cascade_failure"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    CANCELLED = "cancelled"


class EntityRef(BaseModel):
    """Typed reference to a stored entity."""

    model_config = ConfigDict(frozen=True)

    entity_type: EntityType
    entity_id: str


class DeleteFailure(BaseModel):
    """A single deletion that failed for a reason other than "not found"."""

    model_config = ConfigDict(frozen=True)

    entity_type: EntityType
    entity_id: str
    cause: str

    @property
    def entity(self) -> EntityRef:
        return EntityRef(entity_type=self.entity_type, entity_id=self.entity_id)


class DeletionSet(BaseModel):
    """
    Everything one cascade removes, snapshotted at resolution time.

    `messages` and `flats` keep discovery order and hold each id once.
    `user` is None when only flats (and their messages) are being removed.
    """

    messages: List[str] = Field(default_factory=list)
    flats: List[str] = Field(default_factory=list)
    user: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.messages and not self.flats and self.user is None


class DeletionReport(BaseModel):
    """Result of executing a deletion set."""

    user_id: Optional[str] = None
    deleted_messages: List[str] = Field(default_factory=list)
    deleted_flats: List[str] = Field(default_factory=list)
    user_deleted: bool = False
    failures: List[DeleteFailure] = Field(default_factory=list)
    aborted: Optional[AbortReason] = None
    stopped_before: Optional[DeletionStage] = None

    @property
    def is_complete(self) -> bool:
        """True when every stage ran and every deletion succeeded."""
        if self.failures or self.aborted is not None:
            return False
        return self.user_deleted or self.user_id is None


class Outcome(BaseModel):
    """Single success/failure answer returned to the caller of a removal."""

    status: OutcomeStatus
    reason: Optional[FailureReason] = None
    failures: List[DeleteFailure] = Field(default_factory=list)
    detail: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @classmethod
    def success(cls) -> "Outcome":
        return cls(status=OutcomeStatus.SUCCESS)

    @classmethod
    def failure(
        cls,
        reason: FailureReason,
        failures: Optional[List[DeleteFailure]] = None,
        detail: Optional[str] = None,
    ) -> "Outcome":
        return cls(
            status=OutcomeStatus.FAILURE,
            reason=reason,
            failures=list(failures or []),
            detail=detail,
        )
