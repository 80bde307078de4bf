"""
Staged execution of a deletion set.

Deletes messages, then flats, then the user. Within a stage all deletions
are issued concurrently and the stage completes only when every one of them
has settled. A failed deletion does not stop its siblings but does stop the
cascade from moving on to the next stage, so a surviving document never
references a deleted one. There is no rollback; a partially executed cascade
is safe to run again.
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from app.core.document_store import FLATS, MESSAGES, USERS, DocumentNotFound, DocumentStore
from app.schemas.cascade import (
    AbortReason,
    DeleteFailure,
    DeletionReport,
    DeletionSet,
    DeletionStage,
    EntityType,
)

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Stops a cascade between stages.

    Fires when `cancel()` is called or, if a timeout was given, once the
    deadline on the event loop clock has passed. Deletions already in flight
    are always allowed to settle.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._cancelled = False
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = asyncio.get_running_loop().time() + timeout

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def expired(self) -> bool:
        return self._deadline is not None and asyncio.get_running_loop().time() >= self._deadline

    def abort_reason(self) -> Optional[AbortReason]:
        """Reason to stop now, or None to keep going."""
        if self._cancelled:
            return AbortReason.CANCELLED
        if self.expired:
            return AbortReason.DEADLINE_EXCEEDED
        return None


_STAGE_TARGETS = {
    DeletionStage.MESSAGES: (MESSAGES, EntityType.MESSAGE),
    DeletionStage.FLATS: (FLATS, EntityType.FLAT),
    DeletionStage.USER: (USERS, EntityType.USER),
}


class DeletionOrchestrator:
    """Executes deletion sets stage by stage against a document store."""

    def __init__(self, store: DocumentStore, max_concurrency: int = 0):
        """
        Initialize the orchestrator.

        Args:
            store: Document store to delete from
            max_concurrency: Upper bound on in-flight deletions per stage (0 = unbounded)
        """
        self.store = store
        self.max_concurrency = max_concurrency

    async def _delete_one(
        self,
        collection: str,
        entity_type: EntityType,
        document_id: str,
        semaphore: Optional[asyncio.Semaphore],
    ) -> Optional[DeleteFailure]:
        try:
            if semaphore is None:
                await self.store.delete_document(collection, document_id)
            else:
                async with semaphore:
                    await self.store.delete_document(collection, document_id)
        except DocumentNotFound:
            # Already gone: deleting is idempotent
            logger.debug(f"{entity_type.value} {document_id} already deleted")
        except Exception as e:
            logger.warning(f"Failed to delete {entity_type.value} {document_id}: {type(e).__name__}: {e}")
            return DeleteFailure(entity_type=entity_type, entity_id=document_id, cause=str(e) or type(e).__name__)
        return None

    async def _run_stage(self, stage: DeletionStage, ids: List[str]) -> Tuple[List[str], List[DeleteFailure]]:
        """Delete every id in a stage concurrently and wait for all of them."""
        if not ids:
            return [], []

        collection, entity_type = _STAGE_TARGETS[stage]
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None

        logger.info(f"Cascade stage '{stage.value}' started: {len(ids)} deletions")
        results = await asyncio.gather(
            *(self._delete_one(collection, entity_type, document_id, semaphore) for document_id in ids)
        )

        deleted = [document_id for document_id, failure in zip(ids, results) if failure is None]
        failures = [failure for failure in results if failure is not None]
        logger.info(
            f"Cascade stage '{stage.value}' finished: "
            f"{len(deleted)} deleted, {len(failures)} failed"
        )
        return deleted, failures

    async def execute(
        self,
        deletion_set: DeletionSet,
        token: Optional[CancellationToken] = None,
    ) -> DeletionReport:
        """
        Execute a deletion set.

        Args:
            deletion_set: Resolved ids to delete
            token: Optional cancellation/deadline token, checked before each stage

        Returns:
            DeletionReport describing what was deleted, what failed and
            whether the cascade stopped early
        """
        report = DeletionReport(user_id=deletion_set.user)

        stages = [
            (DeletionStage.MESSAGES, deletion_set.messages),
            (DeletionStage.FLATS, deletion_set.flats),
        ]
        if deletion_set.user is not None:
            stages.append((DeletionStage.USER, [deletion_set.user]))

        for index, (stage, ids) in enumerate(stages):
            if token is not None:
                reason = token.abort_reason()
                if reason is not None:
                    logger.warning(f"Cascade aborted before stage '{stage.value}': {reason.value}")
                    report.aborted = reason
                    report.stopped_before = stage
                    break

            deleted, failures = await self._run_stage(stage, ids)

            if stage == DeletionStage.MESSAGES:
                report.deleted_messages.extend(deleted)
            elif stage == DeletionStage.FLATS:
                report.deleted_flats.extend(deleted)
            else:
                report.user_deleted = not failures

            if failures:
                report.failures.extend(failures)
                if index + 1 < len(stages):
                    report.stopped_before = stages[index + 1][0]
                logger.warning(
                    f"Cascade halted after stage '{stage.value}' with {len(failures)} failed deletions"
                )
                break

        return report
