"""Domain model entities for thread synchronization."""

from threadsync.domain.model.comment import CommentNode
from threadsync.domain.model.page import CommentEdge, CommentPage

Forest = tuple[CommentNode, ...]

__all__ = [
    "CommentEdge",
    "CommentNode",
    "CommentPage",
    "Forest",
]
