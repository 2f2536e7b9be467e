# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeState node classes.

Nodes are immutable: every change produces a new TreeNode (see
``TreeNode.replace`` and ``TreeNode.with_properties``). The ``children``
field distinguishes two states:

- ``None``: no children known yet (the node can be lazily populated)
- a tuple (possibly empty): children loaded
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Union

NodeId = Union[int, str]

_TYPED_FIELDS = frozenset(
    ('level', 'is_open', 'is_loading', 'is_active', 'is_leaf', 'total', 'page')
)


@dataclass(frozen=True, slots=True)
class NodeProperties:
    """Presentation and state flags of a node.

    The typed fields are the ones the store itself reads and writes.
    Any other key supplied by the caller lands in ``extra`` and is carried
    along untouched.

    Example:
        >>> props = NodeProperties.from_mapping({'level': 1, 'color': 'red'})
        >>> props.level, props.get('color')
        (1, 'red')
    """

    level: int = 0
    is_open: bool = False
    is_loading: bool = False
    is_active: bool = False
    is_leaf: bool = False
    total: int | str | None = None
    page: int | str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    # extra is a dict, so instances compare by value but are not hashable
    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> NodeProperties:
        """Create properties from a flat mapping.

        Args:
            mapping: Keys matching typed fields set those fields; every
                other key is stored in ``extra``.

        Returns:
            A new NodeProperties instance.
        """
        return cls().merge(mapping)

    def merge(self, patch: Mapping[str, Any] | NodeProperties) -> NodeProperties:
        """Return a copy with ``patch`` shallow-merged over these properties.

        Args:
            patch: Mapping of changes, or another NodeProperties whose fields
                all override these (its extra keys are merged).

        Returns:
            A new NodeProperties, or self if the patch is empty.
        """
        if isinstance(patch, NodeProperties):
            patch = patch.as_dict()
        typed: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in patch.items():
            if key in _TYPED_FIELDS:
                typed[key] = value
            elif key == 'extra':
                extra.update(value)
            else:
                extra[key] = value
        if not typed and not extra:
            return self
        if extra:
            typed['extra'] = {**self.extra, **extra}
        return replace(self, **typed)

    def get(self, name: str, default: Any = None) -> Any:
        """Get a typed field or an extra field by name."""
        if name in _TYPED_FIELDS:
            return getattr(self, name)
        return self.extra.get(name, default)

    def as_dict(self) -> dict[str, Any]:
        """Flatten typed fields and extra keys into one dict."""
        result = {f.name: getattr(self, f.name) for f in fields(self) if f.name != 'extra'}
        result.update(self.extra)
        return result


@dataclass(frozen=True, slots=True, repr=False)
class TreeNode:
    """A node in a TreeState tree.

    Each node has:
    - id: Identifier, unique across the whole tree
    - title: Display string taken from the source record
    - data: The source record, kept verbatim
    - properties: NodeProperties flags (level, is_open, ...)
    - children: Tuple of child nodes, or None if not loaded yet

    Example:
        >>> node = TreeNode(1, 'Root', {'id': 1, 'name': 'Root'})
        >>> node.is_loaded
        False
        >>> node.with_properties({'is_open': True}).properties.is_open
        True
    """

    id: NodeId
    title: str
    data: Any = None
    properties: NodeProperties = field(default_factory=NodeProperties)
    children: tuple[TreeNode, ...] | None = None

    # data and properties may hold dicts, use node.id as key instead
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.children is not None and not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children))
        if not isinstance(self.properties, NodeProperties):
            object.__setattr__(
                self, 'properties', NodeProperties.from_mapping(self.properties)
            )

    def __repr__(self) -> str:
        children_repr = 'None' if self.children is None else str(len(self.children))
        return f"TreeNode({self.id!r}, {self.title!r}, children={children_repr})"

    @property
    def is_loaded(self) -> bool:
        """True if children are known (possibly none), False if not loaded yet."""
        return self.children is not None

    def replace(self, **changes: Any) -> TreeNode:
        """Return a copy of this node with the given fields changed."""
        return replace(self, **changes)

    def with_properties(self, patch: Mapping[str, Any] | NodeProperties) -> TreeNode:
        """Return a copy with ``patch`` merged into the properties."""
        merged = self.properties.merge(patch)
        if merged == self.properties:
            return self
        return replace(self, properties=merged)

    def as_dict(self) -> dict[str, Any]:
        """Convert to plain dict (recursive).

        Children become a list of dicts, or None when not loaded.
        """
        return {
            'id': self.id,
            'title': self.title,
            'data': self.data,
            'properties': self.properties.as_dict(),
            'children': (
                None if self.children is None
                else [child.as_dict() for child in self.children]
            ),
        }
