"""Domain layer DI providers."""

from dishka import Scope, provide

from threadsync.config import StoreSettings
from threadsync.domain.service import CommentTreeStore
from threadsync.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    A request scope is one view of one thread: it owns a single store that
    every use case of that view shares.
    """

    scope = Scope.REQUEST

    @provide
    def get_comment_tree_store(self, store_settings: StoreSettings) -> CommentTreeStore:
        """Provide the comment tree store of the current view."""
        return CommentTreeStore(max_orphans=store_settings.max_orphans)
