"""Push event use cases."""

from .apply_push_event import ApplyPushEventResponse, ApplyPushEventUseCase
from .follow_thread import (
    FollowThreadRequest,
    FollowThreadResponse,
    FollowThreadUseCase,
)

__all__ = [
    "ApplyPushEventResponse",
    "ApplyPushEventUseCase",
    "FollowThreadRequest",
    "FollowThreadResponse",
    "FollowThreadUseCase",
]
