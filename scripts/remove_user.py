#!/usr/bin/env python3
"""
Remove a user and everything that depends on them.

Deletes the user's messages, the messages about the user's flats, the flats
and finally the user, using the same cascade as the admin endpoint.

Usage:
    python scripts/remove_user.py <user_id> [--timeout SECONDS]

Exits 0 on success and 1 when the removal is incomplete. The removal is
idempotent: run it again to finish an incomplete one.
"""
import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.core.cache import cache, evict_removed_user
from app.core.database import AsyncSessionLocal, engine
from app.core.document_store import SQLDocumentStore
from app.services.deletion_orchestrator import CancellationToken
from app.services.user_removal_service import UserRemovalService


async def remove_user(user_id: str, timeout: float) -> int:
    """Run the cascade and print the outcome."""
    await cache.connect()
    try:
        service = UserRemovalService(
            SQLDocumentStore(AsyncSessionLocal),
            listeners=[evict_removed_user],
            max_concurrency=settings.cascade_max_concurrency,
        )
        token = CancellationToken(timeout=timeout) if timeout > 0 else None

        print(f"🧹 Removing user {user_id}...")
        outcome = await service.remove_user_cascade(user_id, token=token)

        if outcome.is_success:
            print("✅ User and all dependent flats and messages removed")
            return 0

        print(f"❌ Removal incomplete ({outcome.reason.value}); safe to retry")
        if outcome.detail:
            print(f"   {outcome.detail}")
        for failure in outcome.failures:
            print(f"   - {failure.entity_type.value} {failure.entity_id}: {failure.cause}")
        return 1
    finally:
        await cache.disconnect()
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Remove a user with all dependent flats and messages")
    parser.add_argument("user_id", help="Id of the user to remove")
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.cascade_deadline_seconds,
        help="Stop starting new stages after this many seconds (0 = no deadline)",
    )
    args = parser.parse_args()
    return asyncio.run(remove_user(args.user_id, args.timeout))


if __name__ == "__main__":
    sys.exit(main())
