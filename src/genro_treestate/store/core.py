# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore - Versioned holder of an immutable tree.

This module provides the TreeStore class, which owns one tree (a tuple of
root TreeNode) and exposes structural updates and read-only queries over
it. Nodes are never changed in place: every update computes a new tuple
of roots from the current one and commits it as the next snapshot.

Key Features:
    - **Immutable snapshots**: ``store.nodes`` is never modified after commit
    - **Matched/unmatched updates**: ``update_node`` applies one update to
      the target node and another to every other node in a single walk
    - **Lazy loading**: ``set_children`` attaches children only once
    - **Single selection**: ``set_active`` keeps at most one active node
    - **Ancestry**: ``get_parent`` / ``get_ancestors`` with per-snapshot memo
    - **Subscriptions**: callbacks notified after each commit

Concurrency:
    Each operation runs read-snapshot / compute / commit under one
    re-entrant lock, so an updater always receives the latest committed
    node, also when called from several threads.

Example:
    Basic usage::

        store = TreeStore(
            [{'id': 1, 'name': 'Root 1', 'employees': [{'id': 2, 'name': 'Child 1'}]}],
            id_key='id', title_key='name', children_key='employees',
        )
        store.set_open(1)
        store.open_ids                 # (1,)
        store.get_ancestors(2)         # (TreeNode(1, 'Root 1', children=1),)

    Lazy loading::

        store.set_loading(2, True)
        level = store.get_node(2).properties.level
        store.set_children(2, store.to_tree(fetched_records, depth=level))
        store.set_loading(2, False)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, Iterator, Mapping, Union

from ..builder import TreeBuilder
from ..node import NodeId, NodeProperties, TreeNode
from ..options import TreeOptions
from ..update import UpdateLike, update_tree
from . import query
from .subscription import SubscriptionMixin

logger = logging.getLogger(__name__)

PropertiesPatch = Union[Mapping[str, Any], NodeProperties]
PatchLike = Union[PropertiesPatch, Callable[[TreeNode], PropertiesPatch]]


def _patch_update(patch: PatchLike | None) -> Callable[[TreeNode], TreeNode] | None:
    """Turn a properties patch into a node update merging it."""
    if patch is None:
        return None
    if callable(patch):
        return lambda node: node.with_properties(patch(node))
    return lambda node: node.with_properties(patch)


class TreeStore(SubscriptionMixin):
    """A versioned container for one immutable tree.

    TreeStore provides:
    - initialize / update_node / set_children / set_node_properties:
      structural updates committed as new snapshots
    - set_open / set_loading / set_active: flag helpers
    - traverse / find / filter / get_node: read-only queries
    - get_parent / get_ancestors: ancestry lookups
    - open_ids / loading_ids: root-level views

    Attributes:
        nodes: The current tuple of root nodes.
        version: Number of commits since creation.

    Example:
        >>> store = TreeStore([{'id': 1, 'name': 'A'}], id_key='id',
        ...                   title_key='name', children_key='items')
        >>> store.set_open(1).get_node(1).properties.is_open
        True
    """

    __slots__ = (
        '_options', '_builder', '_nodes', '_version', '_lock',
        '_parent_cache', '_subscribers',
    )

    def __init__(
        self,
        records: Iterable[Any] = (),
        options: TreeOptions | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize a TreeStore.

        Args:
            records: Initial source records, built with the store options.
            options: TreeOptions used to build records. May be omitted when
                the store is only fed with already built nodes.
            **kwargs: TreeOptions fields, overriding ``options``.

        Raises:
            ValueError: If records are given without options.

        Example:
            >>> TreeStore(data, id_key='id', title_key='name', children_key='employees')
            >>> TreeStore(data, TreeOptions('id', 'name', 'employees'))
            >>> TreeStore()  # empty, fed later with initialize()
        """
        if options is not None or kwargs:
            self._options: TreeOptions | None = TreeOptions.resolve(options, **kwargs)
            self._builder: TreeBuilder | None = TreeBuilder(self._options)
        else:
            self._options = None
            self._builder = None
        self._lock = threading.RLock()
        self._parent_cache: dict[NodeId, TreeNode | None] = {}
        self._subscribers = {}
        self._version = 0
        self._nodes: tuple[TreeNode, ...] = ()
        records = tuple(records)
        if records:
            self._nodes = self.to_tree(records)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        """Return string representation showing root ids and version."""
        return f"TreeStore({[node.id for node in self._nodes]}, version={self._version})"

    def __len__(self) -> int:
        """Return the number of root nodes."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        """Iterate over root nodes in order."""
        return iter(self._nodes)

    def __contains__(self, node_id: NodeId) -> bool:
        """Check if a node with ``node_id`` exists anywhere in the tree."""
        return self.get_node(node_id) is not None

    # ==================== Snapshot ====================

    @property
    def nodes(self) -> tuple[TreeNode, ...]:
        """The current tuple of root nodes."""
        return self._nodes

    @property
    def version(self) -> int:
        """Number of snapshots committed since creation."""
        return self._version

    @property
    def options(self) -> TreeOptions | None:
        """The options used by ``to_tree``."""
        return self._options

    def _commit(self, nodes: tuple[TreeNode, ...], reason: str) -> None:
        """Replace the snapshot, drop the parent memo, notify subscribers."""
        self._nodes = nodes
        self._version += 1
        self._parent_cache = {}
        logger.debug("Committed version %d (%s)", self._version, reason)
        self._notify(nodes=nodes, version=self._version, reason=reason)

    def _update(
        self,
        target_id: NodeId,
        matched: UpdateLike,
        unmatched: UpdateLike | None,
        reason: str,
    ) -> TreeStore:
        with self._lock:
            self._commit(update_tree(self._nodes, target_id, matched, unmatched), reason)
        return self

    # ==================== Building ====================

    def to_tree(
        self,
        records: Iterable[Any],
        depth: int | None = None,
    ) -> tuple[TreeNode, ...]:
        """Build nodes from records with the store options, without committing.

        Args:
            records: Source records.
            depth: Depth of the records. Defaults to ``options.initial_depth``.
                Pass the parent ``level`` when building children for an
                existing node, so they get ``level + 1``.

        Raises:
            ValueError: If the store has no options.
            MissingFieldError: If a record lacks the id or title field.

        Example:
            >>> parent = store.get_node(2)
            >>> store.set_children(2, store.to_tree(fetched, depth=parent.properties.level))
        """
        if self._builder is None:
            raise ValueError("TreeStore has no options, cannot build records")
        return self._builder.build(records, depth)

    # ==================== Updates ====================

    def initialize(
        self,
        nodes: Iterable[TreeNode],
        root_id: NodeId | None = None,
    ) -> TreeStore:
        """Replace the whole tree, or attach ``nodes`` under ``root_id``.

        Args:
            nodes: Already built nodes.
            root_id: If given, ``nodes`` become the children of this node,
                as with ``set_children``. Otherwise they become the roots.

        Returns:
            self, for chaining.
        """
        if root_id is not None:
            return self.set_children(root_id, nodes)
        with self._lock:
            self._commit(tuple(nodes), 'initialize')
        return self

    def update_node(
        self,
        target_id: NodeId,
        matched: UpdateLike,
        unmatched: UpdateLike | None = None,
    ) -> TreeStore:
        """Apply ``matched`` to the node(s) with ``target_id`` and ``unmatched``
        to every other node.

        Each update is a TreeNode (replacement), a ``node -> node`` callable,
        or a Replace / Transform. If an update returns a node whose children
        are None, the original children are kept. Children are then walked
        with the same updates, so every node is visited exactly once.

        Args:
            target_id: Id of the node to update.
            matched: Update for the matching node(s).
            unmatched: Update for all other nodes. None leaves them as they are.

        Returns:
            self, for chaining.

        Example:
            >>> store.update_node(2, lambda node: node.replace(title='Renamed'))
        """
        return self._update(target_id, matched, unmatched, 'update_node')

    def set_children(self, target_id: NodeId, children: Iterable[TreeNode]) -> TreeStore:
        """Attach ``children`` to a node whose children are not loaded yet.

        Nodes that already have children (even an empty tuple) are left
        untouched, so repeating the call never overwrites a loaded subtree.
        """
        children = tuple(children)

        def _attach(node: TreeNode) -> TreeNode:
            if node.children is not None:
                return node
            return node.replace(children=children)

        return self._update(target_id, _attach, None, 'set_children')

    def set_node_properties(
        self,
        target_id: NodeId,
        matched_patch: PatchLike,
        unmatched_patch: PatchLike | None = None,
    ) -> TreeStore:
        """Merge property patches into the target node and the other nodes.

        Args:
            target_id: Id of the node to patch.
            matched_patch: Mapping / NodeProperties merged into the target
                properties, or a ``node -> patch`` callable.
            unmatched_patch: Same, for every other node. None leaves them
                as they are.

        Returns:
            self, for chaining.

        Example:
            >>> store.set_node_properties(1, {'is_loading': True, 'page': 2})
            >>> store.set_node_properties(1, lambda node: {'total': len(node.children or ())})
        """
        return self._update(
            target_id,
            _patch_update(matched_patch),
            _patch_update(unmatched_patch),
            'set_node_properties',
        )

    def set_open(self, target_id: NodeId, is_open: bool | None = None) -> TreeStore:
        """Set ``is_open`` on a node. With ``is_open=None`` the flag is toggled."""

        def _patch(node: TreeNode) -> dict[str, Any]:
            if is_open is None:
                return {'is_open': not node.properties.is_open}
            return {'is_open': is_open}

        return self._update(target_id, _patch_update(_patch), None, 'set_open')

    def set_loading(self, target_id: NodeId, is_loading: bool | None = None) -> TreeStore:
        """Set ``is_loading`` on a node. With ``is_loading=None`` the flag is toggled."""

        def _patch(node: TreeNode) -> dict[str, Any]:
            if is_loading is None:
                return {'is_loading': not node.properties.is_loading}
            return {'is_loading': is_loading}

        return self._update(target_id, _patch_update(_patch), None, 'set_loading')

    def set_active(self, target_id: NodeId, is_active: bool) -> TreeStore:
        """Set ``is_active`` on a node.

        Activating a node deactivates every other node, so at most one node
        is active at a time. Deactivating leaves the other nodes untouched.
        """
        unmatched = {'is_active': False} if is_active is True else None
        return self._update(
            target_id,
            _patch_update({'is_active': is_active}),
            _patch_update(unmatched),
            'set_active',
        )

    # ==================== Queries ====================

    def traverse(
        self,
        visit: Callable[[TreeNode], Any],
        nodes: Iterable[TreeNode] | None = None,
    ) -> None:
        """Call ``visit`` on every node of ``nodes`` (default: whole tree), in pre-order."""
        query.traverse(visit, self._nodes if nodes is None else nodes)

    def walk(self, nodes: Iterable[TreeNode] | None = None) -> Iterator[TreeNode]:
        """Yield every node of ``nodes`` (default: whole tree), in pre-order."""
        return query.walk(self._nodes if nodes is None else nodes)

    def find(
        self,
        predicate: query.Predicate,
        nodes: Iterable[TreeNode] | None = None,
    ) -> TreeNode | None:
        """Return the first node (pre-order) satisfying ``predicate``, or None."""
        return query.find(predicate, self._nodes if nodes is None else nodes)

    def filter(self, predicate: query.Predicate) -> list[TreeNode]:
        """Return every node of the tree satisfying ``predicate``, as a flat list."""
        return query.filter_nodes(predicate, self._nodes)

    def get_node(self, node_id: NodeId) -> TreeNode | None:
        """Return the first node with ``node_id``, or None."""
        return self.find(lambda node: node.id == node_id)

    def get_parent(
        self,
        target_id: NodeId,
        search_roots: Iterable[TreeNode] | None = None,
    ) -> TreeNode | None:
        """Return the node whose direct children include ``target_id``, or None."""
        return query.get_parent(target_id, self._nodes if search_roots is None else search_roots)

    def get_ancestors(self, target_id: NodeId) -> tuple[TreeNode, ...]:
        """Return the ancestors of ``target_id``, from root to immediate parent.

        Parent lookups are memoized until the next commit.

        Example:
            >>> [node.id for node in store.get_ancestors(6)]
            [4, 5]
        """
        with self._lock:
            return query.get_ancestors(target_id, self._nodes, self._parent_cache)

    # ==================== Views ====================

    @property
    def open_ids(self) -> tuple[NodeId, ...]:
        """Ids of the root nodes that are open. Descendants are not included."""
        return tuple(node.id for node in self._nodes if node.properties.is_open)

    @property
    def loading_ids(self) -> tuple[NodeId, ...]:
        """Ids of the root nodes that are loading. Descendants are not included."""
        return tuple(node.id for node in self._nodes if node.properties.is_loading)

    def as_list(self) -> list[dict[str, Any]]:
        """Convert the tree to a list of plain dicts (recursive)."""
        return [node.as_dict() for node in self._nodes]
