"""Comment node entity.

A comment node is one comment of a discussion thread together with the
part of its reply subtree that has been loaded so far. Nodes are immutable:
the store replaces the nodes on the path to a change and keeps every other
subtree as the very same object.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, model_validator

from threadsync.domain.model.common import DomainModel
from threadsync.domain.value import (
    AuthorSummary,
    CommentId,
    RepliesPageState,
    VoteType,
)


class CommentNode(DomainModel):
    """Comment node entity.

    Threading is described by:
    - parent_id: Direct parent comment (None for root comments)
    - depth: Nesting level (0 for roots). Recomputed by the store,
      never trusted from the source.
    - children: Loaded replies, in display order
    - replies_page: Pagination state of children
    """

    id: CommentId
    content: str
    author: AuthorSummary
    parent_id: Optional[CommentId] = None
    depth: int = Field(default=0, ge=0)
    vote_count: int = 0
    user_vote: Optional[VoteType] = None
    is_edited: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None
    children: tuple["CommentNode", ...] = ()
    replies_page: RepliesPageState = RepliesPageState()

    @model_validator(mode="after")
    def validate_parent(self) -> "CommentNode":
        """Reject a node that names itself as its parent."""
        if self.parent_id is not None and self.parent_id == self.id:
            raise ValueError("Comment cannot be its own parent")
        return self

    @property
    def is_root(self) -> bool:
        """Whether this is a top-level comment."""
        return self.parent_id is None

    def with_children(
        self,
        children: tuple["CommentNode", ...],
        replies_page: RepliesPageState | None = None,
    ) -> "CommentNode":
        """Copy of this node with new children (and optionally page state)."""
        update: dict[str, object] = {"children": children}
        if replies_page is not None:
            update["replies_page"] = replies_page
        return self.model_copy(update=update)
