"""Follow thread use case."""

from contextlib import aclosing

import logfire
from pydantic import BaseModel

from threadsync.adapter.sse.stream import stream_post_events
from threadsync.config import FeedSettings
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import PostId

from .apply_push_event import ApplyPushEventUseCase


class FollowThreadRequest(BaseModel):
    """Follow thread request."""

    post_id: str
    max_events: int | None = None  # Stop after this many events (None: until closed)


class FollowThreadResponse(BaseModel):
    """Follow thread response."""

    post_id: str
    received: int
    applied: int


class FollowThreadUseCase:
    """Use case for applying a post's push events until the stream ends."""

    def __init__(
        self,
        apply_push_event: ApplyPushEventUseCase,
        store: CommentTreeStore,
        feed_settings: FeedSettings,
    ) -> None:
        """Initialize follow thread use case.

        Args:
            apply_push_event: Use case applying single events
            store: Comment tree store of the current view
            feed_settings: Feed settings (event stream URL, token)
        """
        self.apply_push_event = apply_push_event
        self.store = store
        self.feed_settings = feed_settings

    async def execute(self, request: FollowThreadRequest) -> FollowThreadResponse:
        """Execute follow thread flow.

        Args:
            request: Follow thread request

        Returns:
            Counts of received and applied events

        Raises:
            httpx.HTTPError: If the stream cannot be opened
        """
        post_id = PostId(request.post_id)
        if self.store.post_id is None:
            self.store.reset(post_id)

        received = 0
        applied = 0
        with logfire.span("follow_thread", post_id=post_id):
            events = stream_post_events(
                self.feed_settings.events_base_url,
                post_id,
                auth_token=self.feed_settings.auth_token,
            )
            async with aclosing(events):
                async for event in events:
                    received += 1
                    result = await self.apply_push_event.execute(event)
                    if result.applied:
                        applied += 1
                    if (
                        request.max_events is not None
                        and received >= request.max_events
                    ):
                        break

            logfire.info(
                "Stopped following thread",
                post_id=post_id,
                received=received,
                applied=applied,
            )
        return FollowThreadResponse(
            post_id=request.post_id, received=received, applied=applied
        )
