"""Load more replies use case."""

import logfire
from pydantic import BaseModel

from threadsync.application.inflight import InFlightRegistry
from threadsync.config import FeedSettings
from threadsync.domain.feed import CommentFeed
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentId

from ..base import BaseUseCase


class LoadMoreRepliesRequest(BaseModel):
    """Load more replies request."""

    comment_id: str
    first: int | None = None


class LoadMoreRepliesResponse(BaseModel):
    """Load more replies response."""

    comment_id: str
    fetched: bool  # False when skipped or when the comment vanished
    in_flight: bool = False
    appended: int = 0
    loaded_count: int = 0
    has_more: bool = False


class LoadMoreRepliesUseCase(BaseUseCase):
    """Use case for paging in further replies of one comment."""

    def __init__(
        self,
        feed: CommentFeed,
        store: CommentTreeStore,
        inflight: InFlightRegistry,
        feed_settings: FeedSettings,
    ) -> None:
        """Initialize load more replies use case.

        Args:
            feed: Comment feed
            store: Comment tree store of the current view
            inflight: Registry serializing pagination per comment
            feed_settings: Feed settings (page sizes)
        """
        self.feed = feed
        self.store = store
        self.inflight = inflight
        self.feed_settings = feed_settings

    async def execute(self, request: LoadMoreRepliesRequest) -> LoadMoreRepliesResponse:
        """Execute load more replies flow.

        Only one request per comment runs at a time; a second one returns
        immediately with ``in_flight`` set. A comment deleted while its page
        was in flight makes the result a no-op.

        Args:
            request: Load more replies request

        Returns:
            Outcome of the request

        Raises:
            FeedError: If the fetch fails
        """
        comment_id = CommentId(request.comment_id)
        target = self.store.find(comment_id)
        if target is None:
            logfire.info("Load more replies for unknown comment", comment_id=comment_id)
            return LoadMoreRepliesResponse(comment_id=request.comment_id, fetched=False)
        if target.replies_page.exhausted:
            return LoadMoreRepliesResponse(
                comment_id=request.comment_id,
                fetched=False,
                loaded_count=target.replies_page.loaded_count,
            )

        first = request.first or self.feed_settings.replies_page_size
        with self.inflight.claim(comment_id) as claimed:
            if not claimed:
                logfire.info("Replies page already in flight", comment_id=comment_id)
                return LoadMoreRepliesResponse(
                    comment_id=request.comment_id,
                    fetched=False,
                    in_flight=True,
                    loaded_count=target.replies_page.loaded_count,
                    has_more=True,
                )

            with logfire.span(
                "load_more_replies",
                comment_id=comment_id,
                after=target.replies_page.next_cursor,
            ):
                page = await self.feed.fetch_replies(
                    comment_id, first=first, after=target.replies_page.next_cursor
                )
                before = self.store.find(comment_id)
                if before is None:
                    # Deleted while the page was in flight
                    return LoadMoreRepliesResponse(
                        comment_id=request.comment_id, fetched=False
                    )

                self.store.load_more_replies(comment_id, page)
                after = self.store.find(comment_id) or before
                return LoadMoreRepliesResponse(
                    comment_id=request.comment_id,
                    fetched=True,
                    appended=len(after.children) - len(before.children),
                    loaded_count=after.replies_page.loaded_count,
                    has_more=after.replies_page.has_more,
                )
