"""Thread loading use cases."""

from .load_more_comments import (
    LoadMoreCommentsRequest,
    LoadMoreCommentsResponse,
    LoadMoreCommentsUseCase,
)
from .load_more_replies import (
    LoadMoreRepliesRequest,
    LoadMoreRepliesResponse,
    LoadMoreRepliesUseCase,
)
from .seed_thread import SeedThreadRequest, SeedThreadResponse, SeedThreadUseCase

__all__ = [
    "LoadMoreCommentsRequest",
    "LoadMoreCommentsResponse",
    "LoadMoreCommentsUseCase",
    "LoadMoreRepliesRequest",
    "LoadMoreRepliesResponse",
    "LoadMoreRepliesUseCase",
    "SeedThreadRequest",
    "SeedThreadResponse",
    "SeedThreadUseCase",
]
