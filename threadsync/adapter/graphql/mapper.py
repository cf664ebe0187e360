"""Mapping between GraphQL comment connections and domain nodes.

The API speaks camelCase and nests replies as connections; the domain uses
snake_case nodes with a children tuple and a page state per node.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from threadsync.domain.model import CommentEdge, CommentNode, CommentPage
from threadsync.domain.value import (
    AuthorSummary,
    CommentId,
    PageInfo,
    RepliesPageState,
    UserId,
    VoteType,
)


class WireModel(BaseModel):
    """Base for API payload models (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class WireAuthor(WireModel):
    """Author as returned by the API."""

    id: str
    username: str
    avatar_url: str | None = None
    reputation: int | None = None
    is_verified: bool = False


class WireParentRef(WireModel):
    """Parent reference; only the id is needed."""

    id: str


class WirePageInfo(WireModel):
    """Connection page info."""

    has_next_page: bool = False
    end_cursor: str | None = None


class WireComment(WireModel):
    """Comment as returned by the API."""

    id: str
    content: str
    depth: int = 0
    vote_count: int = 0
    user_vote: VoteType | None = None
    is_edited: bool = False
    created_at: datetime
    updated_at: datetime | None = None
    author: WireAuthor
    parent: WireParentRef | None = None
    replies: "WireConnection | None" = None


class WireEdge(WireModel):
    """Connection edge."""

    node: WireComment
    cursor: str | None = None


class WireConnection(WireModel):
    """Paginated connection of comments."""

    edges: list[WireEdge] = Field(default_factory=list)
    page_info: WirePageInfo = WirePageInfo()
    total_count: int | None = None


WireComment.model_rebuild()


def to_page_info(wire: WirePageInfo) -> PageInfo:
    """Convert wire page info."""
    return PageInfo(has_next_page=wire.has_next_page, end_cursor=wire.end_cursor)


def to_replies_page(connection: WireConnection | None) -> RepliesPageState:
    """Page state of a node's embedded replies.

    A node fetched without a replies connection has no known replies.
    """
    if connection is None:
        return RepliesPageState(exhausted=True)
    return RepliesPageState().advance(
        len(connection.edges),
        to_page_info(connection.page_info),
        connection.total_count,
    )


def to_node(wire: WireComment) -> CommentNode:
    """Convert a wire comment (with its embedded replies) to a node.

    Depth and parent are copied as reported; the store recomputes both
    when the node enters the forest.
    """
    children: tuple[CommentNode, ...] = ()
    if wire.replies is not None:
        children = tuple(to_node(edge.node) for edge in wire.replies.edges)
    return CommentNode(
        id=CommentId(wire.id),
        content=wire.content,
        author=AuthorSummary(
            id=UserId(wire.author.id),
            username=wire.author.username,
            avatar_url=wire.author.avatar_url,
            is_verified=wire.author.is_verified,
            reputation=wire.author.reputation,
        ),
        parent_id=CommentId(wire.parent.id) if wire.parent else None,
        depth=max(wire.depth, 0),
        vote_count=wire.vote_count,
        user_vote=wire.user_vote,
        is_edited=wire.is_edited,
        created_at=wire.created_at,
        updated_at=wire.updated_at,
        children=children,
        replies_page=to_replies_page(wire.replies),
    )


def map_comment_connection(payload: dict[str, Any]) -> CommentPage:
    """Convert a GraphQL comment connection payload to a page.

    Args:
        payload: The connection object (``{edges, pageInfo, totalCount}``)

    Returns:
        Comment page in fetch order
    """
    connection = WireConnection.model_validate(payload)
    return CommentPage(
        edges=tuple(
            CommentEdge(node=to_node(edge.node), cursor=edge.cursor)
            for edge in connection.edges
        ),
        page_info=to_page_info(connection.page_info),
        total_count=connection.total_count,
    )
