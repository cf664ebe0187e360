"""GraphQL comment feed.

Fetches root comment pages and reply pages from the forum's GraphQL API.
"""

from typing import Any

import httpx
import logfire

from threadsync.adapter.error import FeedError
from threadsync.adapter.graphql.mapper import map_comment_connection
from threadsync.adapter.graphql.queries import (
    get_comment_replies_query,
    get_comments_query,
)
from threadsync.domain.feed import CommentFeed
from threadsync.domain.model import CommentEdge, CommentNode, CommentPage
from threadsync.domain.value import CommentId, CommentOrder, PageInfo, PostId


class GraphQLCommentFeed(CommentFeed):
    """Comment feed backed by the GraphQL API."""

    def __init__(
        self,
        endpoint: str,
        auth_token: str | None = None,
        timeout: float = 10.0,
        embed_levels: int = 3,
    ) -> None:
        """Initialize GraphQL comment feed.

        Args:
            endpoint: GraphQL endpoint URL
            auth_token: Bearer token, so the API can report the viewer's votes
            timeout: Request timeout in seconds
            embed_levels: Reply levels embedded under each fetched comment
        """
        self.endpoint = endpoint
        self.auth_token = auth_token
        self.timeout = timeout
        self.embed_levels = embed_levels

    async def fetch_comments(
        self,
        post_id: PostId,
        first: int,
        after: str | None = None,
        order_by: CommentOrder | None = None,
    ) -> CommentPage:
        """Fetch a page of root comments of a post."""
        with logfire.span(
            "graphql_feed.fetch_comments",
            post_id=post_id,
            first=first,
            after=after,
            order_by=order_by,
        ):
            data = await self._execute(
                get_comments_query(self.embed_levels),
                {
                    "postId": post_id,
                    "first": first,
                    "after": after,
                    "orderBy": order_by.value if order_by else None,
                },
            )
            connection = data.get("comments")
            if connection is None:
                raise FeedError(f"No comments connection for post {post_id}")
            page = map_comment_connection(connection)
            logfire.info(
                "Comments page fetched",
                post_id=post_id,
                count=len(page.edges),
                has_next_page=page.page_info.has_next_page,
            )
            return page

    async def fetch_replies(
        self,
        comment_id: CommentId,
        first: int,
        after: str | None = None,
    ) -> CommentPage:
        """Fetch a page of replies of a comment.

        A comment that no longer exists yields an empty, exhausted page.
        """
        with logfire.span(
            "graphql_feed.fetch_replies",
            comment_id=comment_id,
            first=first,
            after=after,
        ):
            data = await self._execute(
                get_comment_replies_query(),
                {"commentId": comment_id, "first": first, "after": after},
            )
            comment = data.get("comment")
            if comment is None or comment.get("replies") is None:
                logfire.warn("Comment gone while fetching replies", comment_id=comment_id)
                return CommentPage(page_info=PageInfo(has_next_page=False))
            page = map_comment_connection(comment["replies"])
            logfire.info(
                "Replies page fetched",
                comment_id=comment_id,
                count=len(page.edges),
                has_next_page=page.page_info.has_next_page,
            )
            return page

    async def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Post a GraphQL request and return its ``data`` object.

        Raises:
            FeedError: On transport failure, HTTP error status or GraphQL errors
        """
        headers = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint,
                    json={"query": query, "variables": variables},
                    headers=headers,
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logfire.error("GraphQL request failed", endpoint=self.endpoint, error=str(e))
            raise FeedError(f"GraphQL request failed: {e}") from e
        except ValueError as e:
            logfire.error("GraphQL response is not JSON", endpoint=self.endpoint)
            raise FeedError("GraphQL response is not JSON") from e

        if body.get("errors"):
            messages = "; ".join(
                str(error.get("message", error)) for error in body["errors"]
            )
            logfire.error("GraphQL errors returned", errors=messages)
            raise FeedError(f"GraphQL errors: {messages}")

        return body.get("data") or {}


class MockCommentFeed(CommentFeed):
    """In-memory comment feed for testing.

    Serves pages out of preloaded lists. Cursors are the stringified index
    of an edge within its list, after sorting. Root comments are served in
    preload order unless an order is requested.
    """

    def __init__(self) -> None:
        self._comments: dict[PostId, list[CommentNode]] = {}
        self._replies: dict[CommentId, list[CommentNode]] = {}
        self.requests: list[tuple[str, str, int, str | None]] = []
        # Sort order of each root comments request
        self.orders: list[CommentOrder | None] = []

    def add_comments(self, post_id: PostId, comments: list[CommentNode]) -> None:
        """Preload root comments of a post."""
        self._comments.setdefault(post_id, []).extend(comments)

    def add_replies(self, comment_id: CommentId, replies: list[CommentNode]) -> None:
        """Preload replies of a comment."""
        self._replies.setdefault(comment_id, []).extend(replies)

    async def fetch_comments(
        self,
        post_id: PostId,
        first: int,
        after: str | None = None,
        order_by: CommentOrder | None = None,
    ) -> CommentPage:
        """Serve a page of preloaded root comments, sorted when asked to."""
        self.requests.append(("comments", post_id, first, after))
        self.orders.append(order_by)
        comments = self._comments.get(post_id, [])
        if order_by is CommentOrder.NEWEST:
            comments = sorted(comments, key=lambda c: c.created_at, reverse=True)
        elif order_by is CommentOrder.OLDEST:
            comments = sorted(comments, key=lambda c: c.created_at)
        elif order_by is CommentOrder.TOP:
            comments = sorted(
                comments, key=lambda c: (c.vote_count, c.created_at), reverse=True
            )
        return self._page(comments, first, after)

    async def fetch_replies(
        self,
        comment_id: CommentId,
        first: int,
        after: str | None = None,
    ) -> CommentPage:
        """Serve a page of preloaded replies."""
        self.requests.append(("replies", comment_id, first, after))
        return self._page(self._replies.get(comment_id, []), first, after)

    @staticmethod
    def _page(nodes: list[CommentNode], first: int, after: str | None) -> CommentPage:
        start = int(after) + 1 if after is not None else 0
        window = nodes[start : start + first]
        edges = tuple(
            CommentEdge(node=node, cursor=str(start + offset))
            for offset, node in enumerate(window)
        )
        return CommentPage(
            edges=edges,
            page_info=PageInfo(
                has_next_page=start + first < len(nodes),
                end_cursor=edges[-1].cursor if edges else after,
            ),
            total_count=len(nodes),
        )
