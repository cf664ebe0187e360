"""Unit tests for FollowThreadUseCase."""

from unittest.mock import patch

import pytest

from threadsync.adapter.sse.events import (
    CommentAddedEvent,
    CommentDeletedEvent,
    ConnectedEvent,
    EventAuthor,
    VoteUpdatedEvent,
)
from threadsync.application.usecase.event import (
    FollowThreadRequest,
    FollowThreadUseCase,
)
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentId, VotableType
from tests.conftest import BASE_TIME, ids
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

STREAM = "threadsync.application.usecase.event.follow_thread.stream_post_events"


def added(comment_id, parent_id=None):
    return CommentAddedEvent(
        id=comment_id,
        content=f"Comment {comment_id}",
        author=EventAuthor(id="u-1", username="alice"),
        post_id="post-1",
        parent_id=parent_id,
        created_at=BASE_TIME,
    )


def fake_stream(events, closed=None):
    """Replacement for stream_post_events yielding fixed events."""

    async def stream(base_url, post_id, auth_token=None, timeout=None):
        try:
            for event in events:
                yield event
        finally:
            if closed is not None:
                closed.append(post_id)

    return stream


class TestFollowThreadUseCase:
    """Tests for FollowThreadUseCase."""

    @pytest.mark.asyncio
    async def test_applies_events_in_order(self, unit_env):
        """Events from the stream are applied as they arrive."""
        # Arrange
        store = await unit_env.get(CommentTreeStore)
        use_case = await unit_env.get(FollowThreadUseCase)
        events = [
            ConnectedEvent(post_id="post-1"),
            added("A"),
            added("A1", parent_id="A"),
            VoteUpdatedEvent(
                target_id="A1", target_type=VotableType.COMMENT, vote_count=3
            ),
            added("A1", parent_id="A"),
            CommentDeletedEvent(id="A", post_id="post-1"),
        ]

        # Act
        with patch(STREAM, fake_stream(events)):
            response = await use_case.execute(FollowThreadRequest(post_id="post-1"))

        # Assert
        assert response.received == 6
        assert response.applied == 4
        assert ids(store.roots) == ["A1"]
        assert store.find(CommentId("A1")).vote_count == 3
        assert store.post_id == "post-1"

    @pytest.mark.asyncio
    async def test_stops_after_max_events(self, unit_env):
        """The stream is closed once enough events were received."""
        store = await unit_env.get(CommentTreeStore)
        use_case = await unit_env.get(FollowThreadUseCase)
        closed: list[str] = []
        events = [added("A"), added("B"), added("C")]

        with patch(STREAM, fake_stream(events, closed)):
            response = await use_case.execute(
                FollowThreadRequest(post_id="post-1", max_events=2)
            )

        assert response.received == 2
        assert ids(store.roots) == ["B", "A"]
        assert closed == ["post-1"]

    @pytest.mark.asyncio
    async def test_passes_configured_stream_settings(self, unit_env):
        """The stream is opened against the configured base URL."""
        use_case = await unit_env.get(FollowThreadUseCase)
        calls = []

        async def stream(base_url, post_id, auth_token=None, timeout=None):
            calls.append((base_url, post_id, auth_token))
            return
            yield

        with patch(STREAM, stream):
            response = await use_case.execute(FollowThreadRequest(post_id="post-7"))

        assert response.received == 0
        assert calls == [("http://localhost:4000", "post-7", None)]
