# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store package - Owner of the configuration tree.

The package is organized into:
- core: ConfigTreeStore with mutations, lookup and persistence
- subscription: Change stream (subscribe/unsubscribe, ChangeEvent)

Example:
    >>> from debugconfigs import ConfigTreeStore
    >>> store = ConfigTreeStore()
    >>> env = store.add_root_item('Environment')
    >>> store.add_child_to_item(env, 'port', 3000)
    >>> store['environment.port']
    '3000'
"""

from .core import STATE_KEY, ConfigTreeStore
from .subscription import ChangeEvent, SubscriberCallback

__all__ = ["ConfigTreeStore", "ChangeEvent", "SubscriberCallback", "STATE_KEY"]
