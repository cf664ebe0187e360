"""Traversal and path-copy primitives over an immutable comment forest.

All walks use an explicit stack, so a thread nested thousands of levels
deep never hits the interpreter's recursion limit.

A path is the tuple of child indices leading from the root sequence to a
node: ``(2,)`` is the third root, ``(2, 0)`` its first child. Mutations copy
only the nodes on a path; every other subtree keeps its identity.
"""

from collections.abc import Callable, Iterable, Iterator, Sequence

from threadsync.domain.model import CommentNode, Forest
from threadsync.domain.value import CommentId

Path = tuple[int, ...]


def iter_nodes(forest: Iterable[CommentNode]) -> Iterator[CommentNode]:
    """Yield every node of the forest in display (pre-)order."""
    stack = list(reversed(tuple(forest)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_path(forest: Sequence[CommentNode], comment_id: CommentId) -> Path | None:
    """Locate a node by id.

    Depth-first, short-circuits on the first match.

    Args:
        forest: Root sequence to search
        comment_id: Comment ID to look for

    Returns:
        Path to the node, or None if it is not in the forest
    """
    stack: list[tuple[CommentNode, Path]] = [
        (node, (index,)) for index, node in reversed(tuple(enumerate(forest)))
    ]
    while stack:
        node, path = stack.pop()
        if node.id == comment_id:
            return path
        for index in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[index], path + (index,)))
    return None


def node_at(forest: Sequence[CommentNode], path: Path) -> CommentNode:
    """Return the node a path points to."""
    siblings: Sequence[CommentNode] = forest
    node = None
    for index in path:
        node = siblings[index]
        siblings = node.children
    if node is None:
        raise ValueError("Path must not be empty")
    return node


def find_by_id(
    forest: Sequence[CommentNode], comment_id: CommentId
) -> CommentNode | None:
    """Find a node anywhere in the forest."""
    path = find_path(forest, comment_id)
    return node_at(forest, path) if path is not None else None


def exists_by_id(forest: Sequence[CommentNode], comment_id: CommentId) -> bool:
    """Membership test over the whole forest."""
    return any(node.id == comment_id for node in iter_nodes(forest))


def collect_ids(forest: Iterable[CommentNode]) -> set[CommentId]:
    """All ids present in the forest."""
    return {node.id for node in iter_nodes(forest)}


def count_nodes(forest: Iterable[CommentNode]) -> int:
    """Number of nodes in the forest."""
    return sum(1 for _ in iter_nodes(forest))


def rebuild_path(
    forest: Forest,
    path: Path,
    replace: Callable[[CommentNode], CommentNode],
) -> Forest:
    """Replace the node at ``path`` and copy its ancestors.

    Args:
        forest: Current root sequence
        path: Path to the node being replaced
        replace: Function from the old node to its replacement

    Returns:
        New root sequence sharing every untouched subtree with the old one
    """
    ancestors: list[CommentNode] = []
    siblings: Sequence[CommentNode] = forest
    for index in path:
        node = siblings[index]
        ancestors.append(node)
        siblings = node.children

    updated = replace(ancestors[-1])
    if updated is ancestors[-1]:
        return forest

    for level in range(len(path) - 1, 0, -1):
        parent = ancestors[level - 1]
        index = path[level]
        updated = parent.with_children(
            parent.children[:index] + (updated,) + parent.children[index + 1 :]
        )

    root_index = path[0]
    return forest[:root_index] + (updated,) + forest[root_index + 1 :]


def normalize_subtree(
    node: CommentNode,
    depth: int,
    parent_id: CommentId | None,
    seen: set[CommentId] | None = None,
) -> CommentNode:
    """Rewrite depth and parent linkage of a whole subtree.

    Depths reported by a source are never trusted: every node gets
    ``depth`` of its parent plus one, and its ``parent_id`` set to the node
    it actually hangs under. Nodes that already match keep their identity.

    When ``seen`` is given, descendants whose id is already in it are
    dropped (with their subtrees) and every kept id is added to it.

    Args:
        node: Subtree root
        depth: Depth the subtree root must have
        parent_id: Parent the subtree root must point to
        seen: Ids already present elsewhere, updated in place

    Returns:
        Normalized subtree root
    """
    if seen is not None:
        seen.add(node.id)

    built: list[CommentNode] = []
    # (node, depth, parent_id, kept children or None until expanded)
    stack: list[
        tuple[CommentNode, int, CommentId | None, tuple[CommentNode, ...] | None]
    ] = [(node, depth, parent_id, None)]

    while stack:
        current, level, expected_parent, kept = stack.pop()

        if kept is None:
            kept_children: list[CommentNode] = []
            for child in current.children:
                if seen is not None:
                    if child.id in seen:
                        continue
                    seen.add(child.id)
                kept_children.append(child)
            stack.append((current, level, expected_parent, tuple(kept_children)))
            for child in reversed(kept_children):
                stack.append((child, level + 1, current.id, None))
            continue

        split = len(built) - len(kept)
        children = tuple(built[split:])
        del built[split:]

        unchanged = (
            current.depth == level
            and current.parent_id == expected_parent
            and len(children) == len(current.children)
            and all(new is old for new, old in zip(children, current.children))
        )
        if unchanged:
            built.append(current)
        else:
            built.append(
                current.model_copy(
                    update={
                        "depth": level,
                        "parent_id": expected_parent,
                        "children": children,
                    }
                )
            )

    return built[0]


def remove_at_path(
    forest: Forest, path: Path
) -> tuple[Forest, CommentNode, tuple[CommentNode, ...]]:
    """Remove the node at ``path``, promoting its children in its place.

    The children move up one level, into the removed node's position
    under its parent (or into the root sequence for a root). The parent's
    page state loses the removed node and gains the promoted children.

    Args:
        forest: Current root sequence
        path: Path of the node to remove

    Returns:
        Tuple of (new forest, removed node, promoted children)
    """
    target = node_at(forest, path)
    promoted = tuple(
        normalize_subtree(child, target.depth, target.parent_id)
        for child in target.children
    )
    index = path[-1]

    if len(path) == 1:
        return forest[:index] + promoted + forest[index + 1 :], target, promoted

    def splice(parent: CommentNode) -> CommentNode:
        return parent.with_children(
            parent.children[:index] + promoted + parent.children[index + 1 :],
            parent.replies_page.with_removed().with_added(len(promoted)),
        )

    return rebuild_path(forest, path[:-1], splice), target, promoted
