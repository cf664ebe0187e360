"""Load more root comments use case."""

import logfire
from pydantic import BaseModel

from threadsync.application.inflight import InFlightRegistry
from threadsync.config import FeedSettings
from threadsync.domain.feed import CommentFeed
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentOrder

from ..base import BaseUseCase

ROOTS_KEY = "__roots__"


class LoadMoreCommentsRequest(BaseModel):
    """Load more root comments request."""

    first: int | None = None
    order_by: CommentOrder | None = None  # Must match the seeded order if given


class LoadMoreCommentsResponse(BaseModel):
    """Load more root comments response."""

    fetched: bool  # False when skipped (exhausted, in flight, unseeded, reordered)
    in_flight: bool = False
    appended: int = 0
    has_more: bool


class LoadMoreCommentsUseCase(BaseUseCase):
    """Use case for paging in further root comments of the thread."""

    def __init__(
        self,
        feed: CommentFeed,
        store: CommentTreeStore,
        inflight: InFlightRegistry,
        feed_settings: FeedSettings,
    ) -> None:
        """Initialize load more comments use case.

        Args:
            feed: Comment feed
            store: Comment tree store of the current view
            inflight: Registry serializing pagination per target
            feed_settings: Feed settings (page sizes)
        """
        self.feed = feed
        self.store = store
        self.inflight = inflight
        self.feed_settings = feed_settings

    async def execute(
        self, request: LoadMoreCommentsRequest
    ) -> LoadMoreCommentsResponse:
        """Execute load more comments flow.

        Args:
            request: Load more request

        Returns:
            Outcome of the request

        Raises:
            FeedError: If the fetch fails
        """
        post_id = self.store.post_id
        root_page = self.store.root_page
        if post_id is None or root_page.exhausted:
            return LoadMoreCommentsResponse(fetched=False, has_more=False)

        order_by = self.store.root_order or self.feed_settings.comments_order
        if request.order_by is not None and request.order_by != order_by:
            # Cursors of one order are meaningless in another; reseed instead
            logfire.warn(
                "Load more ignored, thread was seeded in another order",
                post_id=post_id,
                seeded=order_by,
                requested=request.order_by,
            )
            return LoadMoreCommentsResponse(fetched=False, has_more=root_page.has_more)

        first = request.first or self.feed_settings.comments_page_size
        with self.inflight.claim(ROOTS_KEY) as claimed:
            if not claimed:
                logfire.info("Root page already in flight", post_id=post_id)
                return LoadMoreCommentsResponse(
                    fetched=False, in_flight=True, has_more=root_page.has_more
                )

            with logfire.span(
                "load_more_comments",
                post_id=post_id,
                after=root_page.next_cursor,
                order_by=order_by,
            ):
                page = await self.feed.fetch_comments(
                    post_id,
                    first=first,
                    after=root_page.next_cursor,
                    order_by=order_by,
                )
                if self.store.post_id != post_id:
                    # The view moved on to another thread meanwhile
                    return LoadMoreCommentsResponse(fetched=False, has_more=False)

                before = len(self.store.roots)
                self.store.load_more_roots(page)
                return LoadMoreCommentsResponse(
                    fetched=True,
                    appended=len(self.store.roots) - before,
                    has_more=self.store.root_page.has_more,
                )
