# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeOptions: configuration for building nodes from source records."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Union

from .node import NodeProperties

PropertiesInitializer = Callable[[Any, int], Union[NodeProperties, Mapping[str, Any]]]


def default_properties(record: Any, depth: int) -> NodeProperties:
    """Initial properties for a record built at ``depth``.

    All flags are off and ``level`` is ``depth + 1``, so with the default
    initial depth of -1 top-level records get level 0.
    """
    return NodeProperties(
        level=depth + 1,
        is_active=False,
        is_loading=False,
        is_open=False,
        is_leaf=False,
    )


@dataclass(frozen=True, slots=True)
class TreeOptions:
    """Immutable configuration for TreeBuilder and TreeStore.

    Attributes:
        id_key: Record field holding the node id.
        title_key: Record field holding the display title.
        children_key: Record field holding the nested records.
        initialize_properties: ``(record, depth) -> properties`` callable.
            May return a NodeProperties or a plain mapping. None means
            ``default_properties``.
        initial_depth: Depth passed for top-level records. Default -1.
    """

    id_key: str
    title_key: str
    children_key: str
    initialize_properties: PropertiesInitializer | None = None
    initial_depth: int = -1

    def __post_init__(self) -> None:
        for name in ('id_key', 'title_key', 'children_key'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                msg = f"{name} must be a non-empty string, got {value!r}"
                raise ValueError(msg)
        if self.initialize_properties is not None and not callable(self.initialize_properties):
            msg = (
                "initialize_properties must be callable, got "
                f"{type(self.initialize_properties).__name__}"
            )
            raise ValueError(msg)
        if isinstance(self.initial_depth, bool) or not isinstance(self.initial_depth, int):
            msg = f"initial_depth must be an int, got {self.initial_depth!r}"
            raise ValueError(msg)

    @property
    def initializer(self) -> PropertiesInitializer:
        """The effective properties initializer."""
        return self.initialize_properties or default_properties

    @classmethod
    def resolve(cls, options: TreeOptions | None = None, **kwargs: Any) -> TreeOptions:
        """Build options from an instance, keyword arguments, or both.

        Keyword arguments override the fields of ``options``.

        Raises:
            ValueError: If no options are given or a value is invalid.

        Example:
            >>> TreeOptions.resolve(id_key='id', title_key='name', children_key='kids')
            >>> TreeOptions.resolve(base_options, initial_depth=0)
        """
        if options is None:
            if not kwargs:
                raise ValueError("id_key, title_key and children_key are required")
            return cls(**kwargs)
        if kwargs:
            return replace(options, **kwargs)
        return options
