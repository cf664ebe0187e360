"""Push event contract.

The event stream delivers JSON envelopes ``{"type", "data", "postId"}``.
Four kinds are understood: ``connected``, ``commentAdded``,
``commentDeleted`` and ``voteUpdated``.
"""

import json
from datetime import datetime, timezone
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from threadsync.adapter.error import EventParseError
from threadsync.domain.model import CommentNode
from threadsync.domain.value import (
    AuthorSummary,
    CommentId,
    PostId,
    RepliesPageState,
    UserId,
    VotableType,
    VoteType,
)


class EventModel(BaseModel):
    """Base for push event payloads (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class EventAuthor(EventModel):
    """Author summary carried by a comment event."""

    id: str
    username: str
    avatar_url: str | None = None


class ConnectedEvent(EventModel):
    """Stream handshake."""

    kind: Literal["connected"] = "connected"
    post_id: str | None = None


class CommentAddedEvent(EventModel):
    """A comment was posted."""

    kind: Literal["commentAdded"] = "commentAdded"
    id: str
    content: str
    author: EventAuthor
    post_id: str
    parent_id: str | None = None
    depth: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_node(self) -> CommentNode:
        """Convert to a comment node.

        A freshly posted comment has no replies yet; any that follow
        arrive as their own events.
        """
        return CommentNode(
            id=CommentId(self.id),
            content=self.content,
            author=AuthorSummary(
                id=UserId(self.author.id),
                username=self.author.username,
                avatar_url=self.author.avatar_url,
            ),
            parent_id=CommentId(self.parent_id) if self.parent_id else None,
            depth=max(self.depth or 0, 0),
            created_at=self.created_at,
            replies_page=RepliesPageState(exhausted=True),
        )


class CommentDeletedEvent(EventModel):
    """A comment was deleted."""

    kind: Literal["commentDeleted"] = "commentDeleted"
    id: str
    post_id: str
    parent_id: str | None = None


class VoteUpdatedEvent(EventModel):
    """Authoritative vote count broadcast for a post or comment.

    ``user_vote`` is the viewing user's vote. When the field is absent the
    viewer's vote is left alone; an explicit null clears it.
    """

    kind: Literal["voteUpdated"] = "voteUpdated"
    target_id: str
    target_type: VotableType
    vote_count: int
    user_vote: VoteType | None = None

    @property
    def carries_user_vote(self) -> bool:
        """Whether the broadcast says anything about the viewer's vote."""
        return "user_vote" in self.model_fields_set


PushEvent = Union[ConnectedEvent, CommentAddedEvent, CommentDeletedEvent, VoteUpdatedEvent]

_EVENT_TYPES: dict[str, type[EventModel]] = {
    "connected": ConnectedEvent,
    "commentAdded": CommentAddedEvent,
    "commentDeleted": CommentDeletedEvent,
    "voteUpdated": VoteUpdatedEvent,
}


def parse_event(raw: str) -> PushEvent:
    """Parse one event envelope.

    Args:
        raw: JSON text of an SSE ``data`` field

    Returns:
        Typed push event

    Raises:
        EventParseError: If the payload is not JSON, the kind is unknown or
            the data does not match the kind
    """
    try:
        envelope: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise EventParseError(f"Event is not valid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise EventParseError("Event envelope must be a JSON object")

    kind = envelope.get("type")
    model = _EVENT_TYPES.get(kind) if isinstance(kind, str) else None
    if model is None:
        raise EventParseError(f"Unknown event type: {kind!r}")

    if model is ConnectedEvent:
        data: Any = {"postId": envelope.get("postId")}
    else:
        data = envelope.get("data")
        if not isinstance(data, dict):
            raise EventParseError(f"Event {kind} carries no data")

    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except PydanticValidationError as e:
        raise EventParseError(f"Invalid {kind} event: {e}") from e
