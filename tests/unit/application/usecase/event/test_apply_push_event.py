"""Unit tests for ApplyPushEventUseCase."""

import pytest

from threadsync.adapter.sse.events import (
    CommentAddedEvent,
    CommentDeletedEvent,
    ConnectedEvent,
    EventAuthor,
    VoteUpdatedEvent,
)
from threadsync.application.usecase.event import ApplyPushEventUseCase
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentId, PostId, VotableType, VoteType
from tests.conftest import BASE_TIME, ids, make_node
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


def added(comment_id, parent_id=None, post_id="post-1"):
    """Build a comment added event."""
    return CommentAddedEvent(
        id=comment_id,
        content=f"Comment {comment_id}",
        author=EventAuthor(id="u-1", username="alice"),
        post_id=post_id,
        parent_id=parent_id,
        created_at=BASE_TIME,
    )


async def seeded(unit_env) -> tuple[CommentTreeStore, ApplyPushEventUseCase]:
    store = await unit_env.get(CommentTreeStore)
    store.reset(PostId("post-1"))
    store.seed([make_node("A", children=(make_node("A1", parent_id="A"),))])
    return store, await unit_env.get(ApplyPushEventUseCase)


class TestApplyPushEventUseCase:
    """Tests for ApplyPushEventUseCase."""

    @pytest.mark.asyncio
    async def test_comment_added_inserts(self, unit_env):
        """A pushed reply is appended under its parent."""
        store, use_case = await seeded(unit_env)

        response = await use_case.execute(added("A2", parent_id="A"))

        assert response.applied
        assert response.kind == "commentAdded"
        assert ids(store.find(CommentId("A")).children) == ["A1", "A2"]

    @pytest.mark.asyncio
    async def test_duplicate_added_ignored(self, unit_env):
        """The same event twice is applied once."""
        store, use_case = await seeded(unit_env)

        await use_case.execute(added("B"))
        response = await use_case.execute(added("B"))

        assert not response.applied
        assert ids(store.roots) == ["B", "A"]

    @pytest.mark.asyncio
    async def test_comment_deleted_removes(self, unit_env):
        """A pushed delete removes the comment."""
        store, use_case = await seeded(unit_env)

        response = await use_case.execute(
            CommentDeletedEvent(id="A1", post_id="post-1", parent_id="A")
        )

        assert response.applied
        assert store.total_count() == 1

    @pytest.mark.asyncio
    async def test_other_post_ignored(self, unit_env):
        """Events of another thread never touch the store."""
        store, use_case = await seeded(unit_env)
        version = store.version

        response = await use_case.execute(added("X", post_id="post-2"))

        assert not response.applied
        assert store.version == version

    @pytest.mark.asyncio
    async def test_vote_broadcast_sets_count_only(self, unit_env):
        """A broadcast without the viewer's vote keeps the viewer's vote."""
        store, use_case = await seeded(unit_env)
        store.update_vote(CommentId("A1"), VoteType.UPVOTE)

        response = await use_case.execute(
            VoteUpdatedEvent(
                target_id="A1", target_type=VotableType.COMMENT, vote_count=10
            )
        )

        node = store.find(CommentId("A1"))
        assert response.applied
        assert node.vote_count == 10
        assert node.user_vote is VoteType.UPVOTE

    @pytest.mark.asyncio
    async def test_vote_broadcast_with_user_vote(self, unit_env):
        """An explicit null user vote clears the viewer's vote."""
        store, use_case = await seeded(unit_env)
        store.update_vote(CommentId("A1"), VoteType.UPVOTE, 1)

        await use_case.execute(
            VoteUpdatedEvent(
                target_id="A1",
                target_type=VotableType.COMMENT,
                vote_count=0,
                user_vote=None,
            )
        )

        node = store.find(CommentId("A1"))
        assert node.vote_count == 0
        assert node.user_vote is None

    @pytest.mark.asyncio
    async def test_post_vote_ignored(self, unit_env):
        """Post vote broadcasts are not for the comment tree."""
        store, use_case = await seeded(unit_env)

        response = await use_case.execute(
            VoteUpdatedEvent(target_id="A", target_type=VotableType.POST, vote_count=99)
        )

        assert not response.applied
        assert store.find(CommentId("A")).vote_count == 0

    @pytest.mark.asyncio
    async def test_connected_is_noop(self, unit_env):
        """The handshake changes nothing."""
        store, use_case = await seeded(unit_env)

        response = await use_case.execute(ConnectedEvent(post_id="post-1"))

        assert not response.applied

    @pytest.mark.asyncio
    async def test_reply_before_parent_converges(self, unit_env):
        """Child pushed before its parent ends up under the parent."""
        store, use_case = await seeded(unit_env)

        await use_case.execute(added("P1", parent_id="P"))
        await use_case.execute(added("P", parent_id="A1"))

        assert ids(store.find(CommentId("P")).children) == ["P1"]
        assert store.find(CommentId("P1")).depth == 3
        assert store.orphans() == {}
