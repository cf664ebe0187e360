"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import logfire
import pytest

from threadsync.domain.model import CommentEdge, CommentNode, CommentPage
from threadsync.domain.value import (
    AuthorSummary,
    CommentId,
    PageInfo,
    RepliesPageState,
    UserId,
    VoteType,
)

# Keep logfire quiet and local during tests
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_node(
    comment_id: str,
    parent_id: str | None = None,
    children: tuple[CommentNode, ...] = (),
    depth: int = 0,
    vote_count: int = 0,
    user_vote: VoteType | None = None,
    content: str | None = None,
    replies_page: RepliesPageState | None = None,
    minutes: int = 0,
) -> CommentNode:
    """Helper function to build comment nodes for tests.

    The replies page state defaults to "all embedded children loaded".

    Args:
        comment_id: Comment ID
        parent_id: Parent comment ID (None for roots)
        children: Embedded replies
        depth: Reported depth (the store recomputes it)
        vote_count: Vote count
        user_vote: Viewer's vote
        content: Text (defaults to a text derived from the id)
        replies_page: Page state of the children
        minutes: Offset of created_at from a fixed base time

    Returns:
        Comment node
    """
    return CommentNode(
        id=CommentId(comment_id),
        content=content if content is not None else f"Comment {comment_id}",
        author=AuthorSummary(id=UserId(f"user-{comment_id}"), username=f"author-{comment_id}"),
        parent_id=CommentId(parent_id) if parent_id else None,
        depth=depth,
        vote_count=vote_count,
        user_vote=user_vote,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        children=children,
        replies_page=replies_page
        or RepliesPageState(
            loaded_count=len(children), total_count=len(children), exhausted=True
        ),
    )


def make_page(
    nodes: list[CommentNode],
    has_next_page: bool = False,
    end_cursor: str | None = None,
    total_count: int | None = None,
) -> CommentPage:
    """Helper function to build a comment page.

    Args:
        nodes: Nodes of the page in fetch order
        has_next_page: Whether another page exists
        end_cursor: Cursor of the last edge (defaults to the last node's id)
        total_count: Server-reported total

    Returns:
        Comment page
    """
    edges = tuple(CommentEdge(node=node, cursor=f"c-{node.id}") for node in nodes)
    if end_cursor is None and edges:
        end_cursor = edges[-1].cursor
    return CommentPage(
        edges=edges,
        page_info=PageInfo(has_next_page=has_next_page, end_cursor=end_cursor),
        total_count=total_count,
    )


def ids(nodes) -> list[str]:
    """Ids of a node sequence, for compact assertions."""
    return [node.id for node in nodes]


@pytest.fixture
def paged_replies() -> RepliesPageState:
    """Page state of a comment with more replies to load."""
    return RepliesPageState(loaded_count=2, total_count=6, next_cursor="c-A2")
