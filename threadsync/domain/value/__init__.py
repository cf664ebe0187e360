"""Domain value objects for thread synchronization."""

from threadsync.domain.value.identifiers import CommentId, PostId, UserId
from threadsync.domain.value.types import (
    AuthorSummary,
    CommentOrder,
    PageInfo,
    RepliesPageState,
    VotableType,
    VoteType,
)

__all__ = [
    # Identifiers
    "CommentId",
    "PostId",
    "UserId",
    # Types
    "AuthorSummary",
    "CommentOrder",
    "PageInfo",
    "RepliesPageState",
    "VotableType",
    "VoteType",
]
