"""Delete comment use case."""

from pydantic import BaseModel

from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    comment_id: str
    removed: bool  # False if already gone
    total_count: int


class DeleteCommentUseCase:
    """Use case for dropping a comment the viewer deleted."""

    def __init__(self, store: CommentTreeStore) -> None:
        """Initialize delete comment use case.

        Args:
            store: Comment tree store of the current view
        """
        self.store = store

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Args:
            request: Delete comment request

        Returns:
            Whether something was removed
        """
        removed = self.store.remove(CommentId(request.comment_id))
        return DeleteCommentResponse(
            comment_id=request.comment_id,
            removed=removed,
            total_count=self.store.total_count(),
        )
