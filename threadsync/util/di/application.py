"""Application layer DI providers."""

from dishka import Scope, provide

from threadsync.application.inflight import InFlightRegistry
from threadsync.application.usecase.comment import (
    ApplyVoteResultUseCase,
    DeleteCommentUseCase,
    EditCommentUseCase,
    SubmitCommentUseCase,
)
from threadsync.application.usecase.event import (
    ApplyPushEventUseCase,
    FollowThreadUseCase,
)
from threadsync.application.usecase.thread import (
    LoadMoreCommentsUseCase,
    LoadMoreRepliesUseCase,
    SeedThreadUseCase,
)
from threadsync.config import FeedSettings
from threadsync.domain.feed import CommentFeed
from threadsync.domain.service import CommentTreeStore
from threadsync.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_inflight_registry(self) -> InFlightRegistry:
        """Provide the pagination in-flight registry of the current view."""
        return InFlightRegistry()

    # Thread use cases
    @provide(scope=Scope.REQUEST)
    def get_seed_thread_use_case(
        self,
        feed: CommentFeed,
        store: CommentTreeStore,
        feed_settings: FeedSettings,
    ) -> SeedThreadUseCase:
        """Provide seed thread use case."""
        return SeedThreadUseCase(feed=feed, store=store, feed_settings=feed_settings)

    @provide(scope=Scope.REQUEST)
    def get_load_more_comments_use_case(
        self,
        feed: CommentFeed,
        store: CommentTreeStore,
        inflight: InFlightRegistry,
        feed_settings: FeedSettings,
    ) -> LoadMoreCommentsUseCase:
        """Provide load more comments use case."""
        return LoadMoreCommentsUseCase(
            feed=feed, store=store, inflight=inflight, feed_settings=feed_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_load_more_replies_use_case(
        self,
        feed: CommentFeed,
        store: CommentTreeStore,
        inflight: InFlightRegistry,
        feed_settings: FeedSettings,
    ) -> LoadMoreRepliesUseCase:
        """Provide load more replies use case."""
        return LoadMoreRepliesUseCase(
            feed=feed, store=store, inflight=inflight, feed_settings=feed_settings
        )

    # Event use cases
    @provide(scope=Scope.REQUEST)
    def get_apply_push_event_use_case(
        self, store: CommentTreeStore
    ) -> ApplyPushEventUseCase:
        """Provide apply push event use case."""
        return ApplyPushEventUseCase(store=store)

    @provide(scope=Scope.REQUEST)
    def get_follow_thread_use_case(
        self,
        apply_push_event: ApplyPushEventUseCase,
        store: CommentTreeStore,
        feed_settings: FeedSettings,
    ) -> FollowThreadUseCase:
        """Provide follow thread use case."""
        return FollowThreadUseCase(
            apply_push_event=apply_push_event,
            store=store,
            feed_settings=feed_settings,
        )

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_apply_vote_result_use_case(
        self, store: CommentTreeStore
    ) -> ApplyVoteResultUseCase:
        """Provide apply vote result use case."""
        return ApplyVoteResultUseCase(store=store)

    @provide(scope=Scope.REQUEST)
    def get_submit_comment_use_case(
        self, store: CommentTreeStore
    ) -> SubmitCommentUseCase:
        """Provide submit comment use case."""
        return SubmitCommentUseCase(store=store)

    @provide(scope=Scope.REQUEST)
    def get_edit_comment_use_case(self, store: CommentTreeStore) -> EditCommentUseCase:
        """Provide edit comment use case."""
        return EditCommentUseCase(store=store)

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, store: CommentTreeStore
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(store=store)
