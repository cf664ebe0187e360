"""Apply vote result use case."""

from pydantic import BaseModel

from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentId, VoteType


class ApplyVoteResultRequest(BaseModel):
    """Result of the viewer's vote (or vote removal) mutation."""

    comment_id: str
    user_vote: VoteType | None  # None after removing the vote
    vote_count: int | None = None  # Server count, if the mutation returned one


class ApplyVoteResultResponse(BaseModel):
    """Apply vote result response."""

    comment_id: str
    applied: bool
    vote_count: int | None  # Current count, None if the comment is gone
    user_vote: VoteType | None


class ApplyVoteResultUseCase:
    """Use case for applying the viewer's own vote to the store.

    The mutation owns ``user_vote``. The count is written only when the
    server returned one; otherwise the vote broadcast delivers it, which
    avoids counting the viewer's vote twice.
    """

    def __init__(self, store: CommentTreeStore) -> None:
        """Initialize apply vote result use case.

        Args:
            store: Comment tree store of the current view
        """
        self.store = store

    async def execute(self, request: ApplyVoteResultRequest) -> ApplyVoteResultResponse:
        """Execute apply vote result flow.

        Args:
            request: Vote mutation result

        Returns:
            The comment's vote fields after the update
        """
        comment_id = CommentId(request.comment_id)
        applied = self.store.update_vote(
            comment_id, request.user_vote, request.vote_count
        )
        node = self.store.find(comment_id)
        return ApplyVoteResultResponse(
            comment_id=request.comment_id,
            applied=applied,
            vote_count=node.vote_count if node else None,
            user_vote=node.user_vote if node else None,
        )
