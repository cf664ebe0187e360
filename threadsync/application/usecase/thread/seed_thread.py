"""Seed thread use case."""

import logfire
from pydantic import BaseModel

from threadsync.config import FeedSettings
from threadsync.domain.feed import CommentFeed
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentOrder, PostId


class SeedThreadRequest(BaseModel):
    """Seed thread request."""

    post_id: str
    first: int | None = None  # Defaults to the configured page size
    order_by: CommentOrder | None = None  # Defaults to the configured order


class SeedThreadResponse(BaseModel):
    """Seed thread response."""

    post_id: str
    root_count: int
    total_count: int
    has_more: bool
    order_by: CommentOrder
    version: int


class SeedThreadUseCase:
    """Use case for loading the first page of a thread into the store."""

    def __init__(
        self,
        feed: CommentFeed,
        store: CommentTreeStore,
        feed_settings: FeedSettings,
    ) -> None:
        """Initialize seed thread use case.

        Args:
            feed: Comment feed
            store: Comment tree store of the current view
            feed_settings: Feed settings (page sizes, sort order)
        """
        self.feed = feed
        self.store = store
        self.feed_settings = feed_settings

    async def execute(self, request: SeedThreadRequest) -> SeedThreadResponse:
        """Execute seed thread flow.

        Navigating to another post resets the store first; re-seeding the
        same post keeps replies still waiting for their parent.

        Args:
            request: Seed thread request

        Returns:
            Summary of the seeded thread

        Raises:
            FeedError: If the fetch fails
        """
        post_id = PostId(request.post_id)
        first = request.first or self.feed_settings.comments_page_size
        order_by = request.order_by or self.feed_settings.comments_order

        with logfire.span(
            "seed_thread", post_id=post_id, first=first, order_by=order_by
        ):
            page = await self.feed.fetch_comments(
                post_id, first=first, order_by=order_by
            )

            if self.store.post_id != post_id:
                self.store.reset(post_id)
            self.store.seed(
                page.nodes, page.page_info, page.total_count, order_by=order_by
            )

            snapshot = self.store.snapshot()
            return SeedThreadResponse(
                post_id=request.post_id,
                root_count=len(snapshot.roots),
                total_count=snapshot.total_count,
                has_more=snapshot.root_page.has_more,
                order_by=order_by,
                version=snapshot.version,
            )
