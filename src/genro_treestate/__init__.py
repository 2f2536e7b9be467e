# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-TreeState - Immutable tree state built from nested records.

A lightweight, zero-dependency library that turns nested source records
into a tree of immutable nodes and keeps it in a versioned store with
open/close, activation, lazy child loading and ancestry queries.
"""

import logging

__version__ = "0.1.0"

from .builder import TreeBuilder, build_tree
from .exceptions import MissingFieldError, TreeStateError
from .node import NodeId, NodeProperties, TreeNode
from .options import TreeOptions, default_properties
from .store import TreeStore
from .update import Replace, Transform, as_update, update_tree

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core classes
    "TreeStore",
    "TreeNode",
    "NodeProperties",
    "NodeId",
    # Building
    "TreeBuilder",
    "TreeOptions",
    "build_tree",
    "default_properties",
    # Updates
    "Replace",
    "Transform",
    "as_update",
    "update_tree",
    # Exceptions
    "TreeStateError",
    "MissingFieldError",
]
