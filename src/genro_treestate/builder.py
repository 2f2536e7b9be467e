# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeBuilder: converts nested source records into a tree of TreeNode.

Records can be mappings (fields read with ``record[key]``) or plain objects
(fields read with ``getattr``). The children field is followed only when it
holds a list or tuple; anything else yields the no-children marker (None).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .exceptions import MissingFieldError
from .node import NodeProperties, TreeNode
from .options import TreeOptions

logger = logging.getLogger(__name__)

_MISSING = object()


def _read_field(record: Any, key: str) -> Any:
    """Read ``key`` from a record, returning _MISSING if absent."""
    if isinstance(record, Mapping):
        return record.get(key, _MISSING)
    return getattr(record, key, _MISSING)


@dataclass(frozen=True)
class TreeBuilder:
    """Builds TreeNode trees from source records.

    The builder is stateless apart from its options, so one instance can be
    shared by any number of stores.

    Example::
        builder = TreeBuilder(TreeOptions('id', 'name', 'employees'))
        roots = builder.build([{'id': 1, 'name': 'Root', 'employees': []}])
        # roots[0]: TreeNode(1, 'Root', children=0), level 0
    """

    options: TreeOptions

    def build(self, records: Iterable[Any], depth: int | None = None) -> tuple[TreeNode, ...]:
        """Convert records to a tuple of nodes, in input order.

        Args:
            records: Source records.
            depth: Depth of these records. Defaults to ``options.initial_depth``.

        Returns:
            Tuple of TreeNode, one per record.

        Raises:
            MissingFieldError: If a record lacks the id or title field.
        """
        if depth is None:
            depth = self.options.initial_depth
        return tuple(self.build_node(record, depth) for record in records)

    def build_node(self, record: Any, depth: int) -> TreeNode:
        """Build one node and, recursively, its children."""
        options = self.options
        node_id = _read_field(record, options.id_key)
        if node_id is _MISSING:
            raise MissingFieldError(options.id_key, record)
        title = _read_field(record, options.title_key)
        if title is _MISSING:
            raise MissingFieldError(options.title_key, record)

        raw_children = _read_field(record, options.children_key)
        if isinstance(raw_children, (list, tuple)):
            children: tuple[TreeNode, ...] | None = self.build(raw_children, depth + 1)
        else:
            children = None

        properties = options.initializer(record, depth)
        if not isinstance(properties, NodeProperties):
            properties = NodeProperties.from_mapping(properties)

        return TreeNode(
            id=node_id,
            title=title,
            data=record,
            properties=properties,
            children=children,
        )


def build_tree(
    records: Iterable[Any],
    options: TreeOptions | None = None,
    **kwargs: Any,
) -> tuple[TreeNode, ...]:
    """Build a tree of TreeNode from nested source records.

    Records are converted recursively, one Python frame per nesting level,
    so nesting deeper than the interpreter recursion limit (about 1000 by
    default, see ``sys.getrecursionlimit``) raises RecursionError.

    Args:
        records: Source records, each exposing the id, title and children fields.
        options: A TreeOptions instance.
        **kwargs: TreeOptions fields, overriding ``options``.

    Returns:
        Tuple of root nodes.

    Example:
        >>> roots = build_tree(
        ...     [{'id': 1, 'name': 'Root 1', 'employees': [{'id': 2, 'name': 'Child 1', 'employees': []}]}],
        ...     id_key='id', title_key='name', children_key='employees',
        ... )
        >>> roots[0].children[0].properties.level
        1
    """
    records = list(records)
    nodes = TreeBuilder(TreeOptions.resolve(options, **kwargs)).build(records)
    logger.debug("Built %d root node(s) from %d record(s)", len(nodes), len(records))
    return nodes
