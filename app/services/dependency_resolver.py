"""
Dependency resolution for cascading user removal.

Finds every document that depends on a user: the messages the user sent,
the flats the user owns, and the messages attached to those flats. The
result is a snapshot; documents created after resolution are not included.
"""
import asyncio
import logging
from typing import Awaitable, Iterable, List

from app.core.document_store import FLATS, MESSAGES, DocumentStore, StoreError
from app.schemas.cascade import DeletionSet

logger = logging.getLogger(__name__)

# Document fields that reference other documents
MESSAGE_SENDER_FIELD = "senderId"
MESSAGE_FLAT_FIELD = "flatID"
FLAT_OWNER_FIELD = "ownerID"


class QueryFailure(Exception):
    """A lookup needed to build the deletion set failed; nothing was deleted."""

    def __init__(self, collection: str, cause: BaseException):
        self.collection = collection
        self.cause = cause
        super().__init__(f"Query on '{collection}' failed: {cause}")


def _unique(ids: Iterable[str]) -> List[str]:
    """De-duplicate ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))


async def _gather_all(*lookups: Awaitable[List[str]]) -> List[List[str]]:
    """Run lookups concurrently; raise the first failure once all have settled."""
    results = await asyncio.gather(*lookups, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


class DependencyResolver:
    """Builds the deletion set for a user. Read-only."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def _query_ids(self, collection: str, field_name: str, value: str) -> List[str]:
        try:
            refs = await self.store.query_by_field(collection, field_name, value)
        except StoreError as e:
            raise QueryFailure(collection, e.cause) from e
        except Exception as e:
            # Driver errors the store did not wrap (connection refused, ...)
            raise QueryFailure(collection, e) from e
        return [ref.id for ref in refs]

    async def _messages_for_flats(self, flat_ids: List[str]) -> List[str]:
        if not flat_ids:
            return []
        per_flat = await _gather_all(
            *(self._query_ids(MESSAGES, MESSAGE_FLAT_FIELD, flat_id) for flat_id in flat_ids)
        )
        return [message_id for ids in per_flat for message_id in ids]

    async def resolve(self, user_id: str) -> DeletionSet:
        """
        Compute the deletion set for a user.

        The user document itself is not looked up: removing a user that no
        longer exists resolves to an empty set of dependents and is a no-op.

        Args:
            user_id: Id of the user being removed

        Returns:
            DeletionSet with de-duplicated message and flat ids

        Raises:
            QueryFailure: If any lookup fails
        """
        sent_messages, owned_flats = await _gather_all(
            self._query_ids(MESSAGES, MESSAGE_SENDER_FIELD, user_id),
            self._query_ids(FLATS, FLAT_OWNER_FIELD, user_id),
        )
        flat_messages = await self._messages_for_flats(owned_flats)

        deletion_set = DeletionSet(
            messages=_unique([*sent_messages, *flat_messages]),
            flats=_unique(owned_flats),
            user=user_id,
        )

        logger.info(
            f"Resolved deletion set for user {user_id}: "
            f"{len(deletion_set.messages)} messages, {len(deletion_set.flats)} flats"
        )
        return deletion_set

    async def resolve_flats(self, flat_ids: List[str]) -> DeletionSet:
        """
        Compute the deletion set for removing flats without their owner.

        Raises:
            QueryFailure: If any lookup fails
        """
        flats = _unique(flat_ids)
        messages = await self._messages_for_flats(flats)
        return DeletionSet(messages=_unique(messages), flats=flats, user=None)
