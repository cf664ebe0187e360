#!/usr/bin/env python3
"""Seed a thread and apply its push events until the stream closes.

Usage:
    python scripts/follow_thread.py <post-id> [max-events]
"""

import asyncio
import sys

import logfire

from threadsync.application.usecase.event import (
    FollowThreadRequest,
    FollowThreadUseCase,
)
from threadsync.application.usecase.thread import (
    SeedThreadRequest,
    SeedThreadUseCase,
)
from threadsync.config import Settings
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.tree import iter_nodes
from threadsync.util.di import build_container
from threadsync.util.logging import get_logger, setup_logging
from threadsync.util.observability import configure_logfire, instrument_httpx

logger = get_logger(__name__)


async def follow(post_id: str, max_events: int | None) -> None:
    """Seed the thread, follow it and print the resulting tree."""
    container = build_container()
    try:
        async with container() as view:
            seed = await view.get(SeedThreadUseCase)
            seeded = await seed.execute(SeedThreadRequest(post_id=post_id))
            logger.info(
                f"Seeded post {post_id}: {seeded.root_count} roots, {seeded.total_count} comments"
            )

            follow_thread = await view.get(FollowThreadUseCase)
            result = await follow_thread.execute(
                FollowThreadRequest(post_id=post_id, max_events=max_events)
            )
            logger.info(f"Applied {result.applied} of {result.received} events")

            store = await view.get(CommentTreeStore)
            for node in iter_nodes(store.roots):
                print(f"{'  ' * node.depth}- [{node.vote_count}] {node.author.username}: {node.content[:60]}")
    finally:
        await container.close()


def main() -> int:
    """Run the follower and log any failure to Logfire."""
    if len(sys.argv) < 2:
        print(__doc__)
        return 2

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)
    instrument_httpx()

    max_events = int(sys.argv[2]) if len(sys.argv) > 2 else None
    try:
        asyncio.run(follow(sys.argv[1], max_events))
        return 0
    except Exception as e:
        logfire.error(
            "Following thread failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
