"""GraphQL comment feed adapter."""

from threadsync.adapter.graphql.client import GraphQLCommentFeed, MockCommentFeed
from threadsync.adapter.graphql.mapper import map_comment_connection, to_node

__all__ = [
    "GraphQLCommentFeed",
    "MockCommentFeed",
    "map_comment_connection",
    "to_node",
]
