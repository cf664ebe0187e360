"""Domain value objects for thread synchronization.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from pydantic import Field

from threadsync.domain.value.common import ValueObject
from threadsync.domain.value.identifiers import UserId


class VoteType(str, Enum):
    """The viewing user's own vote on a comment."""

    UPVOTE = "UPVOTE"
    DOWNVOTE = "DOWNVOTE"

    @classmethod
    def _missing_(cls, value: object) -> "VoteType | None":
        # The API sends upper case, local callers often use lower case
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None


class CommentOrder(str, Enum):
    """Sort order of a post's root comments."""

    NEWEST = "NEWEST"
    OLDEST = "OLDEST"
    TOP = "TOP"

    @classmethod
    def _missing_(cls, value: object) -> "CommentOrder | None":
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None


class VotableType(str, Enum):
    """Type of entity a vote broadcast refers to."""

    POST = "post"
    COMMENT = "comment"

    @classmethod
    def _missing_(cls, value: object) -> "VotableType | None":
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


class AuthorSummary(ValueObject):
    """Denormalized author summary carried on every comment."""

    id: UserId
    username: str
    avatar_url: str | None = None
    is_verified: bool = False
    reputation: int | None = None


class PageInfo(ValueObject):
    """Cursor pagination info of a connection."""

    has_next_page: bool = False
    end_cursor: str | None = None


class RepliesPageState(ValueObject):
    """Pagination state of one node's children (or of the root sequence).

    Business rules:
    - loaded_count only increases
    - next_cursor only advances (a page without a cursor keeps the old one)
    - once exhausted, never reverts
    """

    loaded_count: int = Field(default=0, ge=0)
    total_count: int = Field(default=0, ge=0)
    next_cursor: str | None = None
    exhausted: bool = False

    @property
    def has_more(self) -> bool:
        """Whether another page can be requested."""
        return not self.exhausted

    def advance(
        self,
        appended: int,
        page_info: PageInfo,
        total_count: int | None = None,
    ) -> "RepliesPageState":
        """Merge a fetched page into this state.

        Args:
            appended: Number of nodes actually appended from the page
            page_info: Page info returned with the page
            total_count: Server-reported total, if the page carried one

        Returns:
            New page state
        """
        loaded = self.loaded_count + max(appended, 0)
        exhausted = self.exhausted or not page_info.has_next_page
        next_cursor = page_info.end_cursor or self.next_cursor
        total = max(self.total_count, loaded, total_count or 0)
        return RepliesPageState(
            loaded_count=loaded,
            total_count=total,
            next_cursor=next_cursor,
            exhausted=exhausted,
        )

    def with_added(self, count: int = 1) -> "RepliesPageState":
        """Account for children attached outside of pagination."""
        return self.model_copy(
            update={
                "loaded_count": self.loaded_count + count,
                "total_count": self.total_count + count,
            }
        )

    def with_removed(self, count: int = 1) -> "RepliesPageState":
        """Account for removed children.

        Only the total shrinks; the loaded count is a high-water mark.
        """
        return self.model_copy(
            update={"total_count": max(self.total_count - count, 0)}
        )
