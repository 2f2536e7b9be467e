# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Node updates and the immutable tree update engine.

An update is either a ``Replace`` (a literal node) or a ``Transform`` (a
function of the current node). Bare nodes and bare callables are accepted
everywhere an update is expected and coerced with ``as_update``.

``update_tree`` walks every node once, applying the matched update to the
nodes whose id equals the target and the unmatched update to all the
others, and returns a new tuple of roots. Subtrees that come back unchanged
are shared with the input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, Union

from .node import NodeId, TreeNode


@dataclass(frozen=True, slots=True)
class Replace:
    """Update that replaces the current node with ``node``."""

    node: TreeNode

    def apply(self, current: TreeNode) -> TreeNode:
        return self.node


@dataclass(frozen=True, slots=True)
class Transform:
    """Update that computes the new node from the current one."""

    func: Callable[[TreeNode], TreeNode]

    def apply(self, current: TreeNode) -> TreeNode:
        return self.func(current)


NodeUpdate = Union[Replace, Transform]
UpdateLike = Union[NodeUpdate, TreeNode, Callable[[TreeNode], TreeNode]]


def as_update(update: UpdateLike | None) -> NodeUpdate | None:
    """Coerce a node or a callable into a NodeUpdate.

    Args:
        update: Replace, Transform, TreeNode, callable, or None.

    Returns:
        The corresponding NodeUpdate, or None for None.

    Raises:
        TypeError: If update is none of the accepted kinds.
    """
    if update is None or isinstance(update, (Replace, Transform)):
        return update
    if isinstance(update, TreeNode):
        return Replace(update)
    if callable(update):
        return Transform(update)
    raise TypeError(
        f"update must be a TreeNode, a callable, Replace or Transform, "
        f"not {type(update).__name__}"
    )


def update_tree(
    nodes: Sequence[TreeNode],
    target_id: NodeId,
    matched: UpdateLike,
    unmatched: UpdateLike | None = None,
) -> tuple[TreeNode, ...]:
    """Return a new tree with ``matched`` applied at ``target_id``.

    For each node, in pre-order:

    - the update (matched if ``node.id == target_id``, else unmatched,
      identity when unmatched is None) is applied to the node
    - the children of the result are taken from the update, or from the
      original node if the update left them None
    - those children are walked the same way

    All nodes sharing the target id receive the matched update. A target
    that matches nothing leaves the content unchanged.

    The walk is recursive, so trees deeper than the interpreter recursion
    limit (about 1000 levels by default) raise RecursionError.

    Args:
        nodes: Root nodes of the tree.
        target_id: Id of the node(s) to update.
        matched: Update for the matching node(s).
        unmatched: Update for every other node.

    Returns:
        Tuple of root nodes. Unchanged nodes are the same objects as in
        ``nodes``.

    Raises:
        TypeError: If an update is invalid or does not return a TreeNode.
    """
    matched_update = as_update(matched)
    if matched_update is None:
        raise TypeError("matched update is required")
    unmatched_update = as_update(unmatched)

    def _walk(node: TreeNode) -> TreeNode:
        update = matched_update if node.id == target_id else unmatched_update
        result = node if update is None else update.apply(node)
        if not isinstance(result, TreeNode):
            raise TypeError(
                f"update for node {node.id!r} returned {type(result).__name__}, "
                "expected TreeNode"
            )
        source = result.children if result.children is not None else node.children
        children = _walk_all(source) if source is not None else None
        if children is result.children:
            return result
        return result.replace(children=children)

    def _walk_all(siblings: tuple[TreeNode, ...]) -> tuple[TreeNode, ...]:
        walked = tuple(_walk(child) for child in siblings)
        if all(new is old for new, old in zip(walked, siblings)):
            return siblings
        return walked

    return _walk_all(tuple(nodes))
