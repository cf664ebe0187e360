"""Push event adapter."""

from threadsync.adapter.sse.events import (
    CommentAddedEvent,
    CommentDeletedEvent,
    ConnectedEvent,
    PushEvent,
    VoteUpdatedEvent,
    parse_event,
)
from threadsync.adapter.sse.stream import SSEEventReader, events_url, stream_post_events

__all__ = [
    "CommentAddedEvent",
    "CommentDeletedEvent",
    "ConnectedEvent",
    "PushEvent",
    "SSEEventReader",
    "VoteUpdatedEvent",
    "events_url",
    "parse_event",
    "stream_post_events",
]
