"""Comment feed interface.

The feed is the remote collaborator the store is filled from: a paginated
connection of root comments per post and a paginated connection of replies
per comment. Implementations live in the adapter layer.
"""

from abc import ABC, abstractmethod

from threadsync.domain.model import CommentPage
from threadsync.domain.value import CommentId, CommentOrder, PostId


class CommentFeed(ABC):
    """Source of comment pages."""

    @abstractmethod
    async def fetch_comments(
        self,
        post_id: PostId,
        first: int,
        after: str | None = None,
        order_by: CommentOrder | None = None,
    ) -> CommentPage:
        """Fetch a page of root comments of a post.

        Each root comment carries a bounded number of embedded replies,
        which may themselves carry embedded replies.

        Args:
            post_id: Post ID
            first: Maximum number of root comments
            after: Cursor to continue after (None for the first page)
            order_by: Sort order (None leaves it to the server)

        Returns:
            Page of root comments
        """
        pass

    @abstractmethod
    async def fetch_replies(
        self,
        comment_id: CommentId,
        first: int,
        after: str | None = None,
    ) -> CommentPage:
        """Fetch a page of direct replies of a comment.

        Args:
            comment_id: Comment whose replies are requested
            first: Maximum number of replies
            after: Cursor to continue after (None for the first page)

        Returns:
            Page of replies
        """
        pass
