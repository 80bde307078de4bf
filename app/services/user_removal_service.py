"""
Cascading user removal.

Removes a user together with every flat they own and every message that
references the user or one of those flats:

    resolve (read-only snapshot)
      -> delete messages
      -> delete flats
      -> delete user
      -> report outcome / notify views

Known race: the deletion set is read once. A message created for the user or
one of their flats after resolution and before its stage runs is not deleted
and is left orphaned. Running the removal again picks it up.
"""
import logging
from typing import List, Optional

from app.core.document_store import DocumentStore
from app.schemas.cascade import FailureReason, Outcome
from app.services.consistency_reporter import ConsistencyReporter, RemovalListener
from app.services.deletion_orchestrator import CancellationToken, DeletionOrchestrator
from app.services.dependency_resolver import DependencyResolver, QueryFailure

logger = logging.getLogger(__name__)


class UserRemovalService:
    """Service entry point for removing users and flats with their dependents."""

    def __init__(
        self,
        store: DocumentStore,
        listeners: Optional[List[RemovalListener]] = None,
        max_concurrency: int = 0,
        deadline_seconds: float = 0,
    ):
        """
        Initialize the removal service.

        Args:
            store: Document store holding users, flats and messages
            listeners: Callables notified after a user is fully removed
            max_concurrency: Bound on in-flight deletions per stage (0 = unbounded)
            deadline_seconds: Default deadline per removal (0 = none)
        """
        self.store = store
        self.resolver = DependencyResolver(store)
        self.orchestrator = DeletionOrchestrator(store, max_concurrency=max_concurrency)
        self.reporter = ConsistencyReporter(listeners)
        self.deadline_seconds = deadline_seconds

    def _default_token(self) -> Optional[CancellationToken]:
        if self.deadline_seconds > 0:
            return CancellationToken(timeout=self.deadline_seconds)
        return None

    async def remove_user_cascade(
        self,
        user_id: str,
        token: Optional[CancellationToken] = None,
    ) -> Outcome:
        """
        Remove a user and everything that depends on them.

        Never raises for store failures: every failure mode is returned as
        an Outcome. Safe to call again after a failure.

        Args:
            user_id: Id of the user to remove
            token: Optional cancellation/deadline token (defaults to the
                configured deadline, if any)

        Returns:
            Outcome.success() when nothing referencing the user remains
        """
        logger.info(f"Removing user {user_id} with cascade")
        try:
            deletion_set = await self.resolver.resolve(user_id)
        except QueryFailure as e:
            logger.error(f"Resolution failed for user {user_id}, nothing deleted: {e}")
            return Outcome.failure(FailureReason.QUERY_FAILURE, detail=str(e))

        report = await self.orchestrator.execute(deletion_set, token or self._default_token())
        return await self.reporter.report(report)

    async def remove_flat_cascade(
        self,
        flat_id: str,
        token: Optional[CancellationToken] = None,
    ) -> Outcome:
        """
        Remove a single flat and the messages attached to it.

        Args:
            flat_id: Id of the flat to remove
            token: Optional cancellation/deadline token

        Returns:
            Outcome of the removal
        """
        logger.info(f"Removing flat {flat_id} with cascade")
        try:
            deletion_set = await self.resolver.resolve_flats([flat_id])
        except QueryFailure as e:
            logger.error(f"Resolution failed for flat {flat_id}, nothing deleted: {e}")
            return Outcome.failure(FailureReason.QUERY_FAILURE, detail=str(e))

        report = await self.orchestrator.execute(deletion_set, token or self._default_token())
        return await self.reporter.report(report)
