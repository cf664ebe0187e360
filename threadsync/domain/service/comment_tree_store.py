"""Comment tree store.

Owns the forest of one discussion thread and reconciles the initial fetch,
per-node reply pagination, push events and optimistic local mutations.

Every operation is idempotent and tolerates a missing target: a duplicate
insert, a second delete or a vote for a comment that is gone are no-ops,
never errors. Replies whose parent has not arrived yet are held in an
orphan buffer and attached as soon as the parent shows up.
"""

from datetime import datetime, timezone

import logfire
from pydantic import Field

from threadsync.domain.model import CommentNode, CommentPage, Forest
from threadsync.domain.model.common import DomainModel
from threadsync.domain.tree import (
    Path,
    collect_ids,
    count_nodes,
    find_path,
    iter_nodes,
    node_at,
    normalize_subtree,
    rebuild_path,
    remove_at_path,
)
from threadsync.domain.value import (
    CommentId,
    CommentOrder,
    PageInfo,
    PostId,
    RepliesPageState,
    VoteType,
)

from .base import Service


class ThreadSnapshot(DomainModel):
    """Read-only view of the store handed to the rendering layer."""

    post_id: PostId | None = None
    roots: Forest = ()
    version: int = Field(default=0, ge=0)
    total_count: int = Field(default=0, ge=0)
    root_page: RepliesPageState = RepliesPageState()
    orphan_count: int = Field(default=0, ge=0)


class CommentTreeStore(Service):
    """In-memory comment forest for one discussion thread."""

    def __init__(self, post_id: PostId | None = None, max_orphans: int = 500) -> None:
        """Initialize an empty store.

        Args:
            post_id: Post this thread belongs to, if bound to one
            max_orphans: Upper bound on replies held while their parent is missing
        """
        self.post_id = post_id
        self.max_orphans = max_orphans
        self._roots: Forest = ()
        self._root_page = RepliesPageState()
        # Order the root sequence was fetched in, pages continue in the same one
        self._root_order: CommentOrder | None = None
        self._orphans: dict[CommentId, list[CommentNode]] = {}
        # Arrival sequence of held replies, for evicting the oldest
        self._held_at: dict[CommentId, int] = {}
        self._hold_seq = 0
        self._version = 0

    def reset(self, post_id: PostId | None = None) -> None:
        """Drop all state and bind the store to another thread.

        Args:
            post_id: Post the store is bound to from now on
        """
        with logfire.span("comment_tree_store.reset", post_id=post_id):
            self.post_id = post_id
            self._roots = ()
            self._root_page = RepliesPageState()
            self._root_order = None
            self._orphans = {}
            self._held_at = {}
            self._version += 1

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def roots(self) -> Forest:
        """Current root sequence."""
        return self._roots

    @property
    def version(self) -> int:
        """Counter bumped on every mutation that changed the state."""
        return self._version

    @property
    def root_page(self) -> RepliesPageState:
        """Pagination state of the root sequence."""
        return self._root_page

    @property
    def root_order(self) -> CommentOrder | None:
        """Sort order of the root sequence, as seeded."""
        return self._root_order

    def snapshot(self) -> ThreadSnapshot:
        """Take an immutable snapshot for rendering."""
        return ThreadSnapshot(
            post_id=self.post_id,
            roots=self._roots,
            version=self._version,
            total_count=self.total_count(),
            root_page=self._root_page,
            orphan_count=sum(len(bucket) for bucket in self._orphans.values()),
        )

    def find(self, comment_id: CommentId) -> CommentNode | None:
        """Find a comment in the forest (orphans excluded)."""
        path = find_path(self._roots, comment_id)
        return node_at(self._roots, path) if path is not None else None

    def contains(self, comment_id: CommentId) -> bool:
        """Whether the id is known, in the forest or held as an orphan."""
        return comment_id in self._known_ids()

    def total_count(self) -> int:
        """Number of comments in the forest.

        Walks the whole forest on every call rather than caching a counter
        that every mutating path would have to keep in step.
        """
        return count_nodes(self._roots)

    def orphans(self) -> dict[CommentId, tuple[CommentNode, ...]]:
        """Held replies, keyed by the parent id they are waiting for."""
        return {
            parent_id: tuple(bucket) for parent_id, bucket in self._orphans.items()
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def seed(
        self,
        root_comments: list[CommentNode],
        page_info: PageInfo | None = None,
        total_count: int | None = None,
        order_by: CommentOrder | None = None,
    ) -> None:
        """Replace the forest with the result of the initial fetch.

        Nodes arriving with a parent are dropped, not promoted to roots.
        Held orphans survive the reseed and are attached if their parent
        is now present.

        Args:
            root_comments: Root comments with their embedded replies
            page_info: Page info of the root connection, if known
            total_count: Server-reported number of root comments
            order_by: Order the root comments were fetched in
        """
        with logfire.span(
            "comment_tree_store.seed",
            post_id=self.post_id,
            count=len(root_comments),
        ):
            self._root_order = order_by
            seen: set[CommentId] = set()
            kept: list[CommentNode] = []
            dropped = 0
            for node in root_comments:
                if node.parent_id is not None or node.id in seen:
                    dropped += 1
                    continue
                kept.append(normalize_subtree(node, 0, None, seen))

            self._roots = tuple(kept)
            if page_info is None:
                self._root_page = RepliesPageState(
                    loaded_count=len(kept),
                    total_count=max(total_count or 0, len(kept)),
                    exhausted=True,
                )
            else:
                self._root_page = RepliesPageState().advance(
                    len(kept), page_info, total_count
                )

            # The fetched forest wins over anything held back, down to
            # replies embedded in held nodes
            forest_ids = set(seen)
            for parent_id in list(self._orphans):
                bucket = [
                    normalize_subtree(held, held.depth, held.parent_id, seen)
                    for held in self._orphans[parent_id]
                    if held.id not in seen
                ]
                if bucket:
                    self._orphans[parent_id] = bucket
                else:
                    del self._orphans[parent_id]

            self._adopt_orphans(forest_ids)
            self._version += 1

            if dropped:
                logfire.warn(
                    "Non-root or duplicate comments dropped from seed",
                    post_id=self.post_id,
                    dropped=dropped,
                )
            logfire.info(
                "Comment tree seeded",
                post_id=self.post_id,
                roots=len(self._roots),
                total=self.total_count(),
            )

    def insert(self, node: CommentNode) -> bool:
        """Insert a comment that arrived by push event or local submission.

        Root comments go to the head of the root sequence. Replies go to the
        end of their parent's children. A reply whose parent is not present
        is held until the parent arrives.

        Args:
            node: Comment to insert (may carry embedded replies)

        Returns:
            True if the comment was accepted, False if it was already known
        """
        with logfire.span(
            "comment_tree_store.insert",
            comment_id=node.id,
            parent_id=node.parent_id,
        ):
            known = self._known_ids()
            if node.id in known:
                logfire.info("Duplicate comment ignored", comment_id=node.id)
                return False

            placed = self._place(node, known)
            if placed is None:
                # Embedded replies already known stay where they are
                self._hold_orphan(
                    normalize_subtree(node, node.depth, node.parent_id, known)
                )
            else:
                self._adopt_orphans(collect_ids([placed]))
            self._version += 1
            return True

    def remove(self, comment_id: CommentId) -> bool:
        """Remove a comment.

        Its replies are kept and move up one level into its position, under
        its parent (or into the root sequence when a root is removed).

        Args:
            comment_id: Comment to remove

        Returns:
            True if something was removed, False if the comment was not known
        """
        with logfire.span("comment_tree_store.remove", comment_id=comment_id):
            path = find_path(self._roots, comment_id)
            if path is not None:
                self._roots, removed, promoted = remove_at_path(self._roots, path)
                if len(path) == 1:
                    self._root_page = self._root_page.with_removed().with_added(
                        len(promoted)
                    )
            else:
                held = self._remove_orphan(comment_id)
                if held is None:
                    logfire.info("Comment to remove not found", comment_id=comment_id)
                    return False
                removed, promoted = held

            # Replies held for the removed comment follow its other replies
            waiting = self._orphans.pop(comment_id, [])
            waiting_at = {orphan.id: self._held_at.get(orphan.id) for orphan in waiting}
            for orphan in waiting:
                known = self._known_ids()
                # A reply the removed comment was itself waiting on becomes a root
                grandparent = (
                    removed.parent_id if removed.parent_id != orphan.id else None
                )
                regrafted = orphan.model_copy(update={"parent_id": grandparent})
                placed = self._place(regrafted, known)
                if placed is None:
                    self._hold_orphan(
                        normalize_subtree(
                            regrafted, regrafted.depth, regrafted.parent_id, known
                        ),
                        waiting_at[orphan.id],
                    )
                else:
                    self._adopt_orphans(collect_ids([placed]))

            self._version += 1
            logfire.info(
                "Comment removed",
                comment_id=comment_id,
                promoted=len(promoted),
                regrafted=len(waiting),
            )
            return True

    def update_vote(
        self,
        comment_id: CommentId,
        user_vote: VoteType | None,
        vote_count: int | None = None,
    ) -> bool:
        """Apply the viewing user's own vote.

        ``user_vote`` is always set (None clears it). ``vote_count`` is only
        written when given; otherwise the count is left to the vote broadcast.

        Returns:
            True if the comment changed
        """
        update: dict[str, object] = {"user_vote": user_vote}
        if vote_count is not None:
            update["vote_count"] = vote_count
        with logfire.span(
            "comment_tree_store.update_vote",
            comment_id=comment_id,
            user_vote=user_vote.value if user_vote else None,
            vote_count=vote_count,
        ):
            return self._update_fields(comment_id, update)

    def apply_vote_count(self, comment_id: CommentId, vote_count: int) -> bool:
        """Apply an authoritative vote count from the vote broadcast.

        Returns:
            True if the comment changed
        """
        with logfire.span(
            "comment_tree_store.apply_vote_count",
            comment_id=comment_id,
            vote_count=vote_count,
        ):
            return self._update_fields(comment_id, {"vote_count": vote_count})

    def update_content(
        self,
        comment_id: CommentId,
        content: str,
        updated_at: datetime | None = None,
    ) -> bool:
        """Apply an edit of a comment's text.

        Returns:
            True if the comment changed
        """
        with logfire.span(
            "comment_tree_store.update_content",
            comment_id=comment_id,
            content_length=len(content),
        ):
            node = self._lookup(comment_id)
            if node is not None and node.content == content:
                return False
            return self._update_fields(
                comment_id,
                {
                    "content": content,
                    "is_edited": True,
                    "updated_at": updated_at or datetime.now(timezone.utc),
                },
            )

    def load_more_replies(self, comment_id: CommentId, page: CommentPage) -> bool:
        """Append a fetched page of replies to a comment.

        Additive only: existing children stay in place, and replies already
        present anywhere (e.g. delivered by a push event while the page was
        in flight) are skipped.

        Args:
            comment_id: Comment whose replies were fetched
            page: The fetched page

        Returns:
            True if the comment changed, False if it is gone or nothing changed
        """
        with logfire.span(
            "comment_tree_store.load_more_replies",
            comment_id=comment_id,
            count=len(page.edges),
            has_next_page=page.page_info.has_next_page,
        ):
            path = find_path(self._roots, comment_id)
            if path is None:
                logfire.info(
                    "Replies page for unknown comment ignored", comment_id=comment_id
                )
                return False

            target = node_at(self._roots, path)
            appended = self._fresh_nodes(
                page.nodes, target.depth + 1, target.id
            )
            replies_page = target.replies_page.advance(
                len(appended), page.page_info, page.total_count
            )
            if not appended and replies_page == target.replies_page:
                return False

            self._roots = rebuild_path(
                self._roots,
                path,
                lambda parent: parent.with_children(
                    parent.children + tuple(appended), replies_page
                ),
            )
            self._adopt_orphans(collect_ids(appended))
            self._version += 1
            logfire.info(
                "Replies loaded",
                comment_id=comment_id,
                appended=len(appended),
                skipped=len(page.edges) - len(appended),
                exhausted=replies_page.exhausted,
            )
            return True

    def load_more_roots(self, page: CommentPage) -> bool:
        """Append a further page of root comments after the existing roots.

        Returns:
            True if the forest or the root page state changed
        """
        with logfire.span(
            "comment_tree_store.load_more_roots",
            post_id=self.post_id,
            count=len(page.edges),
        ):
            roots = [node for node in page.nodes if node.parent_id is None]
            appended = self._fresh_nodes(roots, 0, None)
            root_page = self._root_page.advance(
                len(appended), page.page_info, page.total_count
            )
            if not appended and root_page == self._root_page:
                return False

            self._roots = self._roots + tuple(appended)
            self._root_page = root_page
            self._adopt_orphans(collect_ids(appended))
            self._version += 1
            logfire.info(
                "Root comments loaded",
                post_id=self.post_id,
                appended=len(appended),
                exhausted=root_page.exhausted,
            )
            return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _known_ids(self) -> set[CommentId]:
        known = collect_ids(self._roots)
        for bucket in self._orphans.values():
            known |= collect_ids(bucket)
        return known

    def _lookup(self, comment_id: CommentId) -> CommentNode | None:
        node = self.find(comment_id)
        if node is not None:
            return node
        for bucket in self._orphans.values():
            for held in iter_nodes(bucket):
                if held.id == comment_id:
                    return held
        return None

    def _fresh_nodes(
        self,
        nodes: list[CommentNode],
        depth: int,
        parent_id: CommentId | None,
    ) -> list[CommentNode]:
        """Normalize incoming nodes, dropping those already known."""
        seen = self._known_ids()
        fresh: list[CommentNode] = []
        for node in nodes:
            if node.id in seen:
                continue
            fresh.append(normalize_subtree(node, depth, parent_id, seen))
        return fresh

    def _place(self, node: CommentNode, seen: set[CommentId]) -> CommentNode | None:
        """Attach a node to the forest.

        Returns:
            The node as placed, or None if its parent is not in the forest
        """
        if node.parent_id is None:
            placed = normalize_subtree(node, 0, None, seen)
            self._roots = (placed,) + self._roots
            self._root_page = self._root_page.with_added()
            return placed

        path: Path | None = find_path(self._roots, node.parent_id)
        if path is None:
            return None

        parent = node_at(self._roots, path)
        placed = normalize_subtree(node, parent.depth + 1, parent.id, seen)
        self._roots = rebuild_path(
            self._roots,
            path,
            lambda target: target.with_children(
                target.children + (placed,), target.replies_page.with_added()
            ),
        )
        return placed

    def _hold_orphan(self, node: CommentNode, held_at: int | None = None) -> None:
        """Buffer a reply until its parent arrives.

        Args:
            node: Reply whose parent is not in the forest
            held_at: Arrival sequence to keep, when the reply was held before
        """
        parent_id = node.parent_id
        if parent_id is None:
            raise ValueError("Root comments are never held as orphans")
        self._orphans.setdefault(parent_id, []).append(node)
        if held_at is None:
            self._hold_seq += 1
            held_at = self._hold_seq
        self._held_at[node.id] = held_at
        logfire.info(
            "Reply held until its parent arrives",
            comment_id=node.id,
            parent_id=parent_id,
        )

        held = {o.id for bucket in self._orphans.values() for o in bucket}
        self._held_at = {
            comment_id: seq
            for comment_id, seq in self._held_at.items()
            if comment_id in held
        }
        while len(held) > self.max_orphans:
            _, oldest_parent, index = min(
                (self._held_at.get(o.id, 0), bucket_parent, position)
                for bucket_parent, bucket in self._orphans.items()
                for position, o in enumerate(bucket)
            )
            evicted = self._orphans[oldest_parent].pop(index)
            if not self._orphans[oldest_parent]:
                del self._orphans[oldest_parent]
            held.discard(evicted.id)
            self._held_at.pop(evicted.id, None)
            logfire.warn(
                "Orphan buffer full, oldest held reply evicted",
                comment_id=evicted.id,
                parent_id=oldest_parent,
                max_orphans=self.max_orphans,
            )

    def _adopt_orphans(self, arrived: set[CommentId]) -> None:
        """Attach held replies whose parent is among the arrived ids."""
        pending = [parent_id for parent_id in arrived if parent_id in self._orphans]
        while pending:
            parent_id = pending.pop()
            waiting = self._orphans.pop(parent_id, [])
            waiting_at = {orphan.id: self._held_at.get(orphan.id) for orphan in waiting}
            for orphan in waiting:
                placed = self._place(orphan, self._known_ids())
                if placed is None:
                    # Parent vanished again; keep holding
                    self._hold_orphan(orphan, waiting_at[orphan.id])
                    continue
                logfire.info(
                    "Held reply attached",
                    comment_id=orphan.id,
                    parent_id=parent_id,
                )
                pending.extend(
                    node_id
                    for node_id in collect_ids([placed])
                    if node_id in self._orphans
                )

    def _remove_orphan(
        self, comment_id: CommentId
    ) -> tuple[CommentNode, tuple[CommentNode, ...]] | None:
        """Remove a node from the orphan buffer, promoting its replies."""
        for parent_id, bucket in self._orphans.items():
            held: Forest = tuple(bucket)
            path = find_path(held, comment_id)
            if path is None:
                continue
            remaining, removed, promoted = remove_at_path(held, path)
            if len(path) == 1:
                # Promoted replies keep the removed reply's place in line
                held_at = self._held_at.pop(removed.id, 0)
                for child in promoted:
                    self._held_at[child.id] = held_at
            if remaining:
                self._orphans[parent_id] = list(remaining)
            else:
                del self._orphans[parent_id]
            logfire.info(
                "Held reply removed", comment_id=comment_id, parent_id=parent_id
            )
            return removed, promoted
        return None

    def _update_fields(self, comment_id: CommentId, update: dict[str, object]) -> bool:
        """Copy-on-write update of scalar fields of one node."""

        def apply(node: CommentNode) -> CommentNode:
            if all(getattr(node, field) == value for field, value in update.items()):
                return node
            return node.model_copy(update=update)

        path = find_path(self._roots, comment_id)
        if path is not None:
            roots = rebuild_path(self._roots, path, apply)
            if roots is self._roots:
                return False
            self._roots = roots
            self._version += 1
            return True

        for parent_id, bucket in self._orphans.items():
            held: Forest = tuple(bucket)
            held_path = find_path(held, comment_id)
            if held_path is None:
                continue
            updated = rebuild_path(held, held_path, apply)
            if updated is held:
                return False
            self._orphans[parent_id] = list(updated)
            self._version += 1
            return True

        logfire.info("Comment to update not found", comment_id=comment_id)
        return False
