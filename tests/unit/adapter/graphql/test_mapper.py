"""Unit tests for GraphQL payload mapping."""

from threadsync.adapter.graphql.mapper import map_comment_connection, to_replies_page
from threadsync.adapter.graphql.queries import get_comment_replies_query, get_comments_query
from threadsync.domain.value import VoteType
from tests.conftest import ids


def wire_comment(comment_id, parent_id=None, replies=None, **fields):
    """Build a comment as the API returns it."""
    payload = {
        "id": comment_id,
        "content": f"Comment {comment_id}",
        "depth": fields.pop("depth", 0),
        "voteCount": fields.pop("voteCount", 0),
        "userVote": fields.pop("userVote", None),
        "isEdited": False,
        "createdAt": "2024-01-01T12:00:00Z",
        "updatedAt": None,
        "author": {
            "id": f"user-{comment_id}",
            "username": f"author-{comment_id}",
            "avatarUrl": None,
            "reputation": 10,
            "isVerified": False,
        },
        "parent": {"id": parent_id} if parent_id else None,
    }
    if replies is not None:
        payload["replies"] = replies
    payload.update(fields)
    return payload


def connection(nodes, has_next_page=False, end_cursor=None, total_count=None):
    """Build a comment connection payload."""
    return {
        "edges": [{"node": node, "cursor": f"c-{node['id']}"} for node in nodes],
        "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
        "totalCount": total_count if total_count is not None else len(nodes),
    }


class TestMapCommentConnection:
    """Tests for map_comment_connection."""

    def test_maps_fields(self):
        """Scalar fields and author come across with snake_case names."""
        payload = connection(
            [wire_comment("A", voteCount=5, userVote="UPVOTE")],
            has_next_page=True,
            end_cursor="c-A",
            total_count=9,
        )

        page = map_comment_connection(payload)

        node = page.nodes[0]
        assert node.id == "A"
        assert node.vote_count == 5
        assert node.user_vote is VoteType.UPVOTE
        assert node.author.username == "author-A"
        assert node.author.reputation == 10
        assert node.parent_id is None
        assert page.page_info.has_next_page
        assert page.page_info.end_cursor == "c-A"
        assert page.total_count == 9
        assert page.edges[0].cursor == "c-A"

    def test_lowercase_vote_accepted(self):
        """Vote direction is matched case-insensitively."""
        page = map_comment_connection(connection([wire_comment("A", userVote="downvote")]))

        assert page.nodes[0].user_vote is VoteType.DOWNVOTE

    def test_embedded_replies_become_children(self):
        """Nested reply connections become children with page state."""
        reply = wire_comment(
            "A1",
            parent_id="A",
            depth=1,
            replies=connection([], has_next_page=True, total_count=4),
        )
        replies = connection(
            [reply], has_next_page=True, end_cursor="c-A1", total_count=3
        )
        payload = connection([wire_comment("A", replies=replies)])

        node = map_comment_connection(payload).nodes[0]

        assert ids(node.children) == ["A1"]
        assert node.children[0].parent_id == "A"
        assert node.replies_page.loaded_count == 1
        assert node.replies_page.total_count == 3
        assert node.replies_page.next_cursor == "c-A1"
        assert node.replies_page.has_more

        nested = node.children[0].replies_page
        assert nested.loaded_count == 0
        assert nested.total_count == 4
        assert nested.has_more

    def test_missing_replies_means_none_known(self):
        """A node fetched without a replies connection is exhausted."""
        node = map_comment_connection(connection([wire_comment("A")])).nodes[0]

        assert node.children == ()
        assert node.replies_page.exhausted
        assert not node.replies_page.has_more

    def test_negative_depth_clamped(self):
        """Depth from the wire never goes below zero."""
        node = map_comment_connection(connection([wire_comment("A", depth=-2)])).nodes[0]

        assert node.depth == 0

    def test_empty_connection(self):
        """An empty payload maps to an empty, final page."""
        page = map_comment_connection({"edges": [], "pageInfo": {"hasNextPage": False}})

        assert page.nodes == []
        assert not page.page_info.has_next_page
        assert page.total_count is None

    def test_no_connection_page_state(self):
        """No connection at all gives an exhausted page state."""
        state = to_replies_page(None)

        assert state.exhausted
        assert state.loaded_count == 0


class TestQueries:
    """Tests for the GraphQL documents."""

    def test_comments_query_embeds_levels(self):
        """Each embedded level adds one replies selection, ending in first: 0."""
        query = get_comments_query(embed_levels=2, replies_per_level=5)

        assert query.count("replies(first: 5)") == 2
        assert query.count("replies(first: 0)") == 1
        assert (
            "comments(postId: $postId, first: $first, after: $after, orderBy: $orderBy)"
            in query
        )
        assert "$orderBy: CommentOrder" in query

    def test_replies_query_pages_by_cursor(self):
        """The replies query pages a comment's connection."""
        query = get_comment_replies_query()

        assert "comment(id: $commentId)" in query
        assert "replies(first: $first, after: $after)" in query
        assert query.count("{") == query.count("}")
