"""Apply push event use case."""

import logfire
from pydantic import BaseModel

from threadsync.adapter.sse.events import (
    CommentAddedEvent,
    CommentDeletedEvent,
    ConnectedEvent,
    PushEvent,
    VoteUpdatedEvent,
)
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentId, VotableType


class ApplyPushEventResponse(BaseModel):
    """Apply push event response."""

    kind: str
    applied: bool  # Whether the store changed


class ApplyPushEventUseCase:
    """Use case for feeding one push event into the store.

    Events for another post and vote broadcasts for posts are ignored.
    """

    def __init__(self, store: CommentTreeStore) -> None:
        """Initialize apply push event use case.

        Args:
            store: Comment tree store of the current view
        """
        self.store = store

    async def execute(self, event: PushEvent) -> ApplyPushEventResponse:
        """Execute apply push event flow.

        Args:
            event: Parsed push event

        Returns:
            Whether the event changed the store
        """
        with logfire.span("apply_push_event", kind=event.kind):
            applied = self._apply(event)
            return ApplyPushEventResponse(kind=event.kind, applied=applied)

    def _apply(self, event: PushEvent) -> bool:
        if isinstance(event, ConnectedEvent):
            logfire.info("Event stream handshake", post_id=event.post_id)
            return False

        if isinstance(event, VoteUpdatedEvent):
            if event.target_type != VotableType.COMMENT:
                return False
            comment_id = CommentId(event.target_id)
            applied = self.store.apply_vote_count(comment_id, event.vote_count)
            if event.carries_user_vote:
                applied = self.store.update_vote(comment_id, event.user_vote) or applied
            return applied

        if not self._for_this_thread(event.post_id):
            logfire.info(
                "Event for another post ignored",
                kind=event.kind,
                post_id=event.post_id,
                bound_post_id=self.store.post_id,
            )
            return False

        if isinstance(event, CommentAddedEvent):
            return self.store.insert(event.to_node())

        if isinstance(event, CommentDeletedEvent):
            return self.store.remove(CommentId(event.id))

        logfire.warn("Unhandled push event", kind=getattr(event, "kind", None))
        return False

    def _for_this_thread(self, post_id: str) -> bool:
        return self.store.post_id is None or self.store.post_id == post_id
