"""Strongly typed identifiers for thread synchronization.

Ids are opaque strings handed out by the API; they are never parsed,
only compared.
"""

from typing import NewType

CommentId = NewType("CommentId", str)
PostId = NewType("PostId", str)
UserId = NewType("UserId", str)
