# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Change notification for ConfigTreeStore.

The store exposes a single change stream. Subscribers register a callback
under an id and receive a ChangeEvent after every mutation has completed.

Example:
    >>> store.subscribe('view', lambda event: print(event.kind))
    >>> store.add_root_item('Environment')
    insert
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ..node import ConfigNode

INSERT = 'insert'
DELETE = 'delete'
UPDATE = 'update'
CLEAR = 'clear'
REPLACE = 'replace'
REFRESH = 'refresh'


@dataclass(frozen=True)
class ChangeEvent:
    """A completed change to the tree.

    Attributes:
        kind: One of insert, delete, update, clear, replace, refresh.
        node: The node that was inserted, removed or updated, if any.
        parent: The parent of that node, or None at root level.
    """

    kind: str
    node: ConfigNode | None = None
    parent: ConfigNode | None = None


SubscriberCallback = Callable[[ChangeEvent], None]


class SubscriptionMixin:
    """Subscribe/publish support for the tree store."""

    __slots__ = ()

    _subscribers: dict[str, SubscriberCallback]

    def subscribe(self, subscriber_id: str, callback: SubscriberCallback) -> None:
        """Register callback under subscriber_id, replacing any previous one."""
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._subscribers[subscriber_id] = callback

    def unsubscribe(self, subscriber_id: str) -> None:
        """Remove a subscriber. Unknown ids are ignored."""
        self._subscribers.pop(subscriber_id, None)

    @property
    def subscribers(self) -> list[str]:
        return list(self._subscribers)

    def _notify(
        self,
        kind: str,
        node: ConfigNode | None = None,
        parent: ConfigNode | None = None,
    ) -> None:
        event = ChangeEvent(kind, node, parent)
        for callback in list(self._subscribers.values()):
            callback(event)
