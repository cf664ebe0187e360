"""Submit comment use case."""

import logfire
from pydantic import BaseModel

from threadsync.domain.model import CommentNode
from threadsync.domain.service import CommentTreeStore


class SubmitCommentRequest(BaseModel):
    """Comment returned by a successful create comment mutation."""

    comment: CommentNode


class SubmitCommentResponse(BaseModel):
    """Submit comment response."""

    comment_id: str
    inserted: bool  # False if the push event already delivered it
    attached: bool  # False while the reply waits for its parent
    total_count: int


class SubmitCommentUseCase:
    """Use case for showing the viewer's own new comment or reply.

    The same comment usually also arrives as a push event; whichever comes
    second is a no-op.
    """

    def __init__(self, store: CommentTreeStore) -> None:
        """Initialize submit comment use case.

        Args:
            store: Comment tree store of the current view
        """
        self.store = store

    async def execute(self, request: SubmitCommentRequest) -> SubmitCommentResponse:
        """Execute submit comment flow.

        Args:
            request: The created comment

        Returns:
            Where the comment ended up
        """
        comment = request.comment
        with logfire.span(
            "submit_comment", comment_id=comment.id, parent_id=comment.parent_id
        ):
            inserted = self.store.insert(comment)
            return SubmitCommentResponse(
                comment_id=comment.id,
                inserted=inserted,
                attached=self.store.find(comment.id) is not None,
                total_count=self.store.total_count(),
            )
