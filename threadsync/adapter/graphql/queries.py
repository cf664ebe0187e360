"""GraphQL documents for the comment feed.

Root comments are fetched with a few levels of replies embedded. The
deepest embedded level asks for ``replies(first: 0)`` so every loaded node
knows whether it has more replies to page in.
"""

COMMENT_FIELDS = """
id
content
depth
voteCount
userVote
isEdited
createdAt
updatedAt
author {
  id
  username
  avatarUrl
  reputation
  isVerified
}
parent {
  id
}
"""

PAGE_FIELDS = """
pageInfo {
  hasNextPage
  endCursor
}
totalCount
"""


def replies_selection(levels: int, per_level: int) -> str:
    """Build the nested ``replies`` selection for embedded levels.

    Args:
        levels: Number of embedded reply levels
        per_level: Replies requested on each embedded level

    Returns:
        Selection set text for a comment's replies
    """
    selection = f"replies(first: 0) {{ {PAGE_FIELDS} }}"
    for _ in range(levels):
        selection = (
            f"replies(first: {per_level}) {{ "
            f"edges {{ node {{ {COMMENT_FIELDS} {selection} }} cursor }} "
            f"{PAGE_FIELDS} }}"
        )
    return selection


def get_comments_query(embed_levels: int = 3, replies_per_level: int = 3) -> str:
    """Root comments of a post with embedded replies."""
    replies = replies_selection(embed_levels, replies_per_level)
    return (
        "query GetComments("
        "$postId: ID!, $first: Int, $after: String, $orderBy: CommentOrder) { "
        "comments(postId: $postId, first: $first, after: $after, orderBy: $orderBy) { "
        f"edges {{ node {{ {COMMENT_FIELDS} {replies} }} cursor }} "
        f"{PAGE_FIELDS} }} }}"
    )


def get_comment_replies_query(
    embed_levels: int = 1, replies_per_level: int = 3
) -> str:
    """Direct replies of one comment, each with embedded replies."""
    replies = replies_selection(embed_levels, replies_per_level)
    return (
        "query GetCommentReplies($commentId: ID!, $first: Int, $after: String) { "
        "comment(id: $commentId) { id "
        "replies(first: $first, after: $after) { "
        f"edges {{ node {{ {COMMENT_FIELDS} {replies} }} cursor }} "
        f"{PAGE_FIELDS} }} }} }}"
    )
