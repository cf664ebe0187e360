"""Cursor-paginated pages of comment nodes."""

from threadsync.domain.model.comment import CommentNode
from threadsync.domain.model.common import DomainModel
from threadsync.domain.value import PageInfo


class CommentEdge(DomainModel):
    """A node and its cursor within a page."""

    node: CommentNode
    cursor: str | None = None


class CommentPage(DomainModel):
    """One page of a comment connection.

    Used both for root comments of a post and for replies of one comment.
    """

    edges: tuple[CommentEdge, ...] = ()
    page_info: PageInfo = PageInfo()
    total_count: int | None = None

    @property
    def nodes(self) -> list[CommentNode]:
        """Nodes of the page in fetch order."""
        return [edge.node for edge in self.edges]
