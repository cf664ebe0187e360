"""Unit tests for settings, logging setup and the DI container."""

import logging

import pytest

from threadsync.adapter.graphql.client import GraphQLCommentFeed, MockCommentFeed
from threadsync.config import Settings
from threadsync.domain.feed import CommentFeed
from threadsync.domain.service import CommentTreeStore
from threadsync.domain.value import CommentOrder
from threadsync.util.di import FeedProvider, get_provider
from threadsync.util.di.base import ProviderBase
from threadsync.util.di.infrastructure import ProdFeedProvider
from threadsync.util.error import (
    ConfigurationError,
    DependencyInjectionError,
    UtilError,
)
from threadsync.util.logging import setup_logging
from tests.di import MockFeedProvider, build_test_container


class ProdOnlyProvider(ProviderBase):
    """Mockable component that ships no mock."""

    __mock_component__ = "feed"


class ProdOnlyImplProvider(ProdOnlyProvider):
    __is_mock__ = False


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Defaults describe a local development setup."""
        settings = Settings(_env_file=None)

        assert settings.feed.comments_page_size == 50
        assert settings.feed.replies_page_size == 10
        assert settings.feed.comments_order is CommentOrder.NEWEST
        assert settings.store.max_orphans == 500

    def test_nested_env_override(self, monkeypatch):
        """Nested values are read with the __ delimiter."""
        monkeypatch.setenv("FEED__GRAPHQL_URL", "https://api.example.com/graphql")
        monkeypatch.setenv("STORE__MAX_ORPHANS", "42")
        monkeypatch.setenv("FEED__COMMENTS_ORDER", "TOP")
        monkeypatch.setenv("ENVIRONMENT", "staging")

        settings = Settings(_env_file=None)

        assert settings.feed.graphql_url == "https://api.example.com/graphql"
        assert settings.store.max_orphans == 42
        assert settings.feed.comments_order is CommentOrder.TOP
        assert settings.environment == "staging"


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.mark.parametrize(
        ("environment", "debug", "level"),
        [
            ("development", False, logging.INFO),
            ("production", False, logging.WARNING),
            ("production", True, logging.DEBUG),
        ],
    )
    def test_level_by_environment(self, environment, debug, level):
        """Application logger level follows environment and debug flag."""
        setup_logging(Settings(_env_file=None, environment=environment, debug=debug))

        assert logging.getLogger("threadsync").level == level


class TestContainer:
    """Tests for provider selection and the test container."""

    def test_get_provider_selects_by_mock_flag(self):
        """Mockable components resolve to their mock or production provider."""
        assert get_provider(FeedProvider, use_mock=True) is MockFeedProvider
        assert get_provider(FeedProvider, use_mock=False) is ProdFeedProvider

    def test_missing_mock_implementation(self):
        """Asking for a mock of a component without one names the component."""
        with pytest.raises(
            DependencyInjectionError, match="No mock implementation for feed"
        ) as exc_info:
            get_provider(ProdOnlyProvider, use_mock=True)

        assert exc_info.value.component == "feed"
        assert exc_info.value.use_mock
        assert get_provider(ProdOnlyProvider) is ProdOnlyImplProvider

    def test_unknown_component_rejected(self):
        """Unmocking a component that does not exist fails fast."""
        with pytest.raises(ValueError, match="Unknown components"):
            build_test_container(unmock={"database"})

    @pytest.mark.asyncio
    async def test_mock_feed_by_default(self):
        """The test container serves the in-memory feed."""
        container = build_test_container()
        try:
            async with container() as view:
                assert isinstance(await view.get(CommentFeed), MockCommentFeed)
                store = await view.get(CommentTreeStore)
                assert store is await view.get(CommentTreeStore)
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_unmocked_feed_is_graphql(self):
        """Unmocking the feed gives the GraphQL implementation."""
        container = build_test_container(unmock={"feed"})
        try:
            async with container() as view:
                assert isinstance(await view.get(CommentFeed), GraphQLCommentFeed)
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_feed_requires_endpoint(self, monkeypatch):
        """An empty GraphQL endpoint is a configuration error."""
        monkeypatch.setenv("FEED__GRAPHQL_URL", "")
        container = build_test_container(unmock={"feed"})
        try:
            async with container() as view:
                with pytest.raises(UtilError) as exc_info:
                    await view.get(CommentFeed)
                assert isinstance(exc_info.value, ConfigurationError)
                assert exc_info.value.setting == "feed.graphql_url"
        finally:
            await container.close()
