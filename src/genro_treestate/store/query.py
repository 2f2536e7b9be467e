# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Read-only traversal helpers over tuples of TreeNode.

All helpers visit nodes depth-first in pre-order: a node, then its
children in order, then its next sibling. Nodes whose children are None
(not loaded) are visited but have nothing to descend into.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, MutableMapping

from ..node import NodeId, TreeNode

Predicate = Callable[[TreeNode], bool]


def walk(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node of ``nodes`` and their descendants, in pre-order.

    Nested generators are used, one per level, so depth is bounded by the
    interpreter recursion limit.

    Example:
        >>> [node.id for node in walk(roots)]  # doctest: +SKIP
        [1, 2, 3, 4]
    """
    for node in nodes:
        yield node
        if node.children:
            yield from walk(node.children)


def traverse(visit: Callable[[TreeNode], object], nodes: Iterable[TreeNode]) -> None:
    """Call ``visit`` on every node, in pre-order."""
    for node in walk(nodes):
        visit(node)


def find(predicate: Predicate, nodes: Iterable[TreeNode]) -> TreeNode | None:
    """Return the first node (pre-order) satisfying ``predicate``, or None."""
    for node in walk(nodes):
        if predicate(node):
            return node
    return None


def filter_nodes(predicate: Predicate, nodes: Iterable[TreeNode]) -> list[TreeNode]:
    """Return all nodes satisfying ``predicate`` as a flat pre-order list."""
    return [node for node in walk(nodes) if predicate(node)]


def get_parent(target_id: NodeId, nodes: Iterable[TreeNode]) -> TreeNode | None:
    """Return the first node whose direct children include ``target_id``.

    Returns:
        The parent node, or None if ``target_id`` is a root or not found.
    """
    return find(
        lambda node: bool(node.children)
        and any(child.id == target_id for child in node.children),
        nodes,
    )


def get_ancestors(
    target_id: NodeId,
    nodes: Iterable[TreeNode],
    cache: MutableMapping[NodeId, TreeNode | None] | None = None,
) -> tuple[TreeNode, ...]:
    """Return the ancestors of ``target_id``, from root to immediate parent.

    Walks upward one ``get_parent`` at a time. When ``cache`` is given, each
    child id -> parent lookup is stored there and reused, so the cache must
    only be shared between calls on the same tree.

    Args:
        target_id: Id of the node whose ancestors are wanted.
        nodes: Root nodes of the tree.
        cache: Optional child id -> parent (or None) memo.

    Returns:
        Tuple of ancestors, root first. Empty for roots and unknown ids.
    """
    roots = tuple(nodes)
    if cache is None:
        cache = {}
    ancestors: list[TreeNode] = []
    seen: set[NodeId] = {target_id}
    current = target_id
    while True:
        if current in cache:
            parent = cache[current]
        else:
            parent = get_parent(current, roots)
            cache[current] = parent
        # a repeated id would otherwise loop forever
        if parent is None or parent.id in seen:
            break
        ancestors.insert(0, parent)
        seen.add(parent.id)
        current = parent.id
    return tuple(ancestors)
