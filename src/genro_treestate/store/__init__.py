# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeStore package - Versioned container for an immutable tree.

The package is organized into:
- core: Main TreeStore class with updates, queries and root-level views
- query: Pure pre-order traversal and ancestry helpers
- subscription: Change notification system

Example:
    >>> from genro_treestate import TreeStore
    >>> store = TreeStore(records, id_key='id', title_key='name', children_key='employees')
    >>> store.set_open(1)
    >>> store.open_ids
    (1,)
"""

from .core import TreeStore
from .subscription import SubscriptionMixin

__all__ = ["SubscriptionMixin", "TreeStore"]
