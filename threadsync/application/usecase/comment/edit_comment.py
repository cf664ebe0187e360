"""Edit comment use case."""

from datetime import datetime

from pydantic import BaseModel

from threadsync.domain.error import ValidationError
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentId

MAX_CONTENT_LENGTH = 10000


class EditCommentRequest(BaseModel):
    """Edit comment request."""

    comment_id: str
    content: str
    updated_at: datetime | None = None  # Server timestamp, if known


class EditCommentResponse(BaseModel):
    """Edit comment response."""

    comment_id: str
    applied: bool


class EditCommentUseCase:
    """Use case for applying an edit of a comment's text."""

    def __init__(self, store: CommentTreeStore) -> None:
        """Initialize edit comment use case.

        Args:
            store: Comment tree store of the current view
        """
        self.store = store

    async def execute(self, request: EditCommentRequest) -> EditCommentResponse:
        """Execute edit comment flow.

        Args:
            request: Edit comment request

        Returns:
            Whether the store changed

        Raises:
            ValidationError: If the new content is empty or too long
        """
        content = request.content.strip()
        if not content:
            raise ValidationError("Comment content cannot be empty")
        if len(content) > MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Comment content cannot exceed {MAX_CONTENT_LENGTH} characters"
            )

        applied = self.store.update_content(
            CommentId(request.comment_id), content, request.updated_at
        )
        return EditCommentResponse(comment_id=request.comment_id, applied=applied)
