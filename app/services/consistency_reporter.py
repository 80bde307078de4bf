"""
Turns a deletion report into the outcome returned to the caller and keeps
locally held views of users in step with it.
"""
import logging
from typing import Awaitable, Callable, List, Optional

from app.schemas.cascade import (
    DeletionReport,
    FailureReason,
    Outcome,
)

logger = logging.getLogger(__name__)

# Async callable notified with the id of a fully removed user
RemovalListener = Callable[[str], Awaitable[None]]


class ConsistencyReporter:
    """
    Maps deletion reports to outcomes.

    Listeners (cache invalidation, pushes to connected admin views, ...) are
    notified only when the removal completed. A partially removed user must
    keep showing up until a retry succeeds.
    """

    def __init__(self, listeners: Optional[List[RemovalListener]] = None):
        self.listeners: List[RemovalListener] = list(listeners or [])

    def add_listener(self, listener: RemovalListener) -> None:
        self.listeners.append(listener)

    @staticmethod
    def to_outcome(report: DeletionReport) -> Outcome:
        """Pure mapping from report to outcome."""
        if report.failures:
            return Outcome.failure(
                FailureReason.PARTIAL_CASCADE_FAILURE,
                failures=report.failures,
                detail="Removal incomplete, retry",
            )
        if report.aborted is not None:
            stage = report.stopped_before.value if report.stopped_before else "unknown"
            return Outcome.failure(
                FailureReason(report.aborted.value),
                detail=f"Removal stopped before stage '{stage}', retry",
            )
        # A report whose user stage never ran (hand-built or truncated) is not a success
        if not report.is_complete:
            return Outcome.failure(
                FailureReason.PARTIAL_CASCADE_FAILURE,
                detail="Removal incomplete, retry",
            )
        return Outcome.success()

    async def _notify(self, user_id: str) -> None:
        for listener in self.listeners:
            try:
                await listener(user_id)
            except Exception as e:
                # The store is already consistent; a stale view is not a failed removal
                logger.error(f"Removal listener failed for user {user_id}: {type(e).__name__}: {e}")

    async def report(self, report: DeletionReport) -> Outcome:
        """
        Produce the outcome for a report and notify listeners on success.

        Args:
            report: Report from DeletionOrchestrator.execute

        Returns:
            Outcome.success() or a failure listing every failed entity
        """
        outcome = self.to_outcome(report)
        subject = f"user {report.user_id}" if report.user_id is not None else "flats"

        if outcome.is_success:
            if report.user_id is not None:
                await self._notify(report.user_id)
            logger.info(
                f"Removal of {subject} succeeded: "
                f"{len(report.deleted_messages)} messages, {len(report.deleted_flats)} flats deleted"
            )
        else:
            logger.warning(
                f"Removal of {subject} failed ({outcome.reason.value}): "
                f"{len(outcome.failures)} failed deletions"
            )

        return outcome
