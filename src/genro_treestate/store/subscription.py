# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Change notifications for TreeStore.

Subscribers are registered under a name and called after every committed
snapshot with keyword arguments:

- store: the TreeStore that changed
- nodes: the new tuple of root nodes
- version: the new snapshot version
- reason: name of the operation that produced the change
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[..., Any]


class SubscriptionMixin:
    """Mixin adding named subscriber callbacks to a store."""

    __slots__ = ()

    _subscribers: dict[str, SubscriberCallback]

    def subscribe(self, name: str, callback: SubscriberCallback) -> None:
        """Register ``callback`` under ``name``, replacing any previous one.

        Subscribers run after the snapshot is committed. If one raises, the
        remaining subscribers are still called and the first exception is
        then raised to the caller of the update, whose change stays
        committed.

        Raises:
            TypeError: If callback is not callable.

        Example:
            >>> store.subscribe('view', lambda store, nodes, version, reason: render(nodes))
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, not {type(callback).__name__}")
        self._subscribers[name] = callback

    def unsubscribe(self, name: str) -> bool:
        """Remove the subscriber registered under ``name``.

        Returns:
            True if a subscriber was removed, False if none was registered.
        """
        return self._subscribers.pop(name, None) is not None

    @property
    def subscribers(self) -> list[str]:
        """Names of the registered subscribers."""
        return list(self._subscribers)

    def _notify(self, **kwargs: Any) -> None:
        """Call every subscriber with the change event.

        Raises:
            Exception: The first exception raised by a subscriber, after
                all subscribers have been called.
        """
        first_error: Exception | None = None
        for name, callback in list(self._subscribers.items()):
            logger.debug("Notifying subscriber %r (%s)", name, kwargs.get('reason'))
            try:
                callback(store=self, **kwargs)
            except Exception as exc:
                logger.exception("Subscriber %r failed (%s)", name, kwargs.get('reason'))
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
