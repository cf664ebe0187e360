"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from threadsync.domain.value import CommentOrder


class FeedSettings(BaseModel):
    """Remote comment API configuration."""

    # GraphQL endpoint serving the comments and comment replies queries
    graphql_url: str = "http://localhost:4000/graphql"

    # Base URL of the push event stream; events live at
    # {events_base_url}/api/posts/{post_id}/events
    events_base_url: str = "http://localhost:4000"

    # Root comments requested per page (initial fetch and "load more comments")
    comments_page_size: int = Field(default=50, ge=1)

    # Sort order of root comments (NEWEST, OLDEST or TOP)
    comments_order: CommentOrder = CommentOrder.NEWEST

    # Replies requested per "load more replies" page
    replies_page_size: int = Field(default=10, ge=1)

    # Request timeout in seconds
    timeout: float = 10.0

    # Bearer token sent with GraphQL requests and as ?token= on the event stream
    auth_token: str | None = None


class StoreSettings(BaseModel):
    """Comment tree store configuration."""

    # Replies whose parent has not arrived yet are held back, up to this many.
    # The oldest held reply is evicted first when the limit is exceeded.
    max_orphans: int = Field(default=500, ge=1)


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, using ``__`` for nested values:

        ENVIRONMENT=production
        FEED__GRAPHQL_URL=https://api.example.com/graphql
        FEED__EVENTS_BASE_URL=https://api.example.com
        STORE__MAX_ORPHANS=1000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows FEED__GRAPHQL_URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    feed: FeedSettings = FeedSettings()
    store: StoreSettings = StoreSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
