"""Domain services."""

from .base import Service
from .comment_tree_store import CommentTreeStore, ThreadSnapshot

__all__ = [
    "CommentTreeStore",
    "Service",
    "ThreadSnapshot",
]
