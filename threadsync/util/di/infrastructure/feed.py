"""Comment feed infrastructure providers."""

from dishka import Scope, provide

from threadsync.adapter.graphql.client import GraphQLCommentFeed
from threadsync.config import FeedSettings
from threadsync.domain.feed import CommentFeed
from threadsync.util.di.base import ProviderBase
from threadsync.util.error import ConfigurationError


class FeedProvider(ProviderBase):
    """Comment feed component base."""

    __mock_component__ = "feed"


class ProdFeedProvider(FeedProvider):
    """Production feed provider using the GraphQL API."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_comment_feed(self, feed_settings: FeedSettings) -> CommentFeed:
        """Provide GraphQL comment feed.

        Raises:
            ConfigurationError: If no GraphQL endpoint is configured
        """
        if not feed_settings.graphql_url:
            raise ConfigurationError(
                "feed.graphql_url", "GraphQL endpoint must be configured"
            )

        return GraphQLCommentFeed(
            endpoint=feed_settings.graphql_url,
            auth_token=feed_settings.auth_token,
            timeout=feed_settings.timeout,
        )
