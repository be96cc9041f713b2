# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""ConfigTreeStore - the owner of a configuration tree.

This module provides the ConfigTreeStore class, which holds the ordered list
of root nodes and is the only entry point for mutating the tree. Every
mutation completes under the store lock, is announced on the change
stream, and is then auto-saved to the attached state surface.

Key Features:
    - **Invariant-safe mutations**: labels are validated and values are
      never set on nodes that own children
    - **Case-insensitive dotted paths**: ``store['environment.dev.port']``
    - **Change stream**: one subscribe/unsubscribe stream for UI refresh
    - **Auto-save**: snapshots written to a key-value state surface;
      save failures are logged, never raised
    - **Export/import**: versioned JSON envelope, all-or-nothing import

Example:
    Basic usage::

        store = ConfigTreeStore(state=MemoryState())
        env = store.add_root_item('Environment')
        dev = store.add_child_to_item(env, 'Development')
        store.add_child_to_item(dev, 'port', '3000')

        print(store['environment.development.port'])  # '3000'
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Iterator

from ..commands import CommandDescriptor, generate_commands
from ..exceptions import ConfigTreeError, HasChildrenError
from ..node import ConfigNode, validate_label
from ..persistence import StateSurface
from ..resolver import find_node, resolve_path
from ..serialization import (
    build_envelope,
    deserialize_nodes,
    dumps,
    loads,
    parse_payload,
    serialize_nodes,
)
from .subscription import (
    CLEAR,
    DELETE,
    INSERT,
    REFRESH,
    REPLACE,
    UPDATE,
    SubscriptionMixin,
)

logger = logging.getLogger(__name__)

STATE_KEY = 'debugConfigTreeState'


class ConfigTreeStore(SubscriptionMixin):
    """An ordered list of root ConfigNodes with consistent mutations.

    ConfigTreeStore provides:
    - add_root_item / add_child_to_item / remove_item / set_item_value /
      clear: the mutation entry points
    - resolve(path) / store[path]: leaf value lookup
    - find(path): node lookup (parents included)
    - save_state / load_state: auto-save and restore
    - export_to_file / import_from_file: file transfer

    All mutations and snapshots share one reentrant lock, so a reader or
    a save never sees a half-applied change.

    Attributes:
        state: The key-value state surface, or None to disable auto-save.
        state_key: Key under which the tree is saved.
    """

    __slots__ = (
        '_roots', '_lock', '_save_lock', '_version', '_saved_version',
        '_subscribers', 'state', 'state_key', 'export_indent',
    )

    def __init__(
        self,
        root_items: Iterable[ConfigNode] | None = None,
        state: StateSurface | None = None,
        state_key: str = STATE_KEY,
        export_indent: int = 2,
    ) -> None:
        """Initialize a ConfigTreeStore.

        Args:
            root_items: Optional initial root nodes. They are taken over,
                not copied.
            state: Key-value surface used by save_state/load_state.
            state_key: Key used on the state surface.
            export_indent: JSON indentation used by export_to_file.

        Raises:
            ValueError: If a node appears more than once in root_items.
        """
        self._roots: list[ConfigNode] = _checked_roots(root_items or [])
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()
        self._version = 0
        self._saved_version = 0
        self._subscribers = {}
        self.state = state
        self.state_key = state_key
        self.export_indent = export_indent

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"ConfigTreeStore({[n.label for n in self._roots]})"

    def __len__(self) -> int:
        """Return the number of root nodes."""
        return len(self._roots)

    def __iter__(self) -> Iterator[ConfigNode]:
        """Iterate over a snapshot of the root nodes."""
        with self._lock:
            return iter(list(self._roots))

    def __contains__(self, path: str) -> bool:
        """True if the dotted path names a node (leaf or parent)."""
        try:
            self.find(path)
            return True
        except LookupError:
            return False

    def __getitem__(self, path: str) -> str:
        """Resolve a dotted path to a leaf value.

        Raises:
            PathNotFoundError: If the path does not exist.
            NotALeafError: If the path names a parent.
        """
        return self.resolve(path)

    def get_root_items(self) -> list[ConfigNode]:
        """Return a copy of the root node list."""
        with self._lock:
            return list(self._roots)

    # ==================== Mutations ====================

    def add_root_item(self, label: str) -> ConfigNode:
        """Append an empty node at root level.

        Raises:
            InvalidLabelError: If label is empty or contains a dot.
        """
        validate_label(label)
        node = ConfigNode(label)
        with self._lock:
            self._roots.append(node)
            logger.debug("Added root item %r", label)
            pending = self._capture()
        self._changed(pending, INSERT, node)
        return node

    def add_child_to_item(
        self, parent: ConfigNode, label: str, value: Any = None
    ) -> ConfigNode:
        """Create a node under parent.

        The child is a leaf if value is given, an empty parent otherwise.
        Adding a child to a leaf discards the leaf's value.

        Raises:
            InvalidLabelError: If label is empty or contains a dot.
            InvalidValueTypeError: If value is not a supported scalar.
        """
        validate_label(label)
        child = ConfigNode(label, value=value)
        with self._lock:
            parent.add_child(child)
            logger.debug("Added child %r to %r", label, parent.label)
            pending = self._capture()
        self._changed(pending, INSERT, child, parent)
        return child

    def remove_item(self, node: ConfigNode) -> bool:
        """Remove node from wherever it is in the tree.

        Root nodes are searched first, then every subtree depth-first.

        Returns:
            True if the node was found and removed, False otherwise.
        """
        with self._lock:
            parent = None
            for i, candidate in enumerate(self._roots):
                if candidate is node:
                    del self._roots[i]
                    logger.debug("Removed root item %r", node.label)
                    break
            else:
                parent = self._find_parent_in(self._roots, node)
                if parent is None:
                    return False
                parent.remove_child(node)
                logger.debug("Removed %r from %r", node.label, parent.label)
            pending = self._capture()
        self._changed(pending, DELETE, node, parent)
        return True

    def set_item_value(self, node: ConfigNode, value: Any) -> None:
        """Set the value of a leaf or empty node.

        Raises:
            HasChildrenError: If node currently has children; nothing changes.
            InvalidValueTypeError: If value is not a supported scalar.
        """
        with self._lock:
            if node.has_children:
                raise HasChildrenError(
                    f"Cannot set value for {node.label!r} because it has children. "
                    "Remove all children first."
                )
            node.set_value(value)
            logger.debug("Set value of %r", node.label)
            parent = self._find_parent_in(self._roots, node)
            pending = self._capture()
        self._changed(pending, UPDATE, node, parent)

    def clear(self) -> None:
        """Remove every node."""
        with self._lock:
            self._roots = []
            logger.debug("Cleared tree")
            pending = self._capture()
        self._changed(pending, CLEAR)

    def update_data(self, nodes: Iterable[ConfigNode]) -> None:
        """Replace the whole root list with nodes.

        Raises:
            ValueError: If a node appears more than once in the new tree.
        """
        new_roots = _checked_roots(nodes)
        with self._lock:
            self._roots = new_roots
            logger.debug("Replaced tree with %d root item(s)", len(new_roots))
            pending = self._capture()
        self._changed(pending, REPLACE)

    def refresh(self) -> None:
        """Announce a refresh without changing anything."""
        self._notify(REFRESH)

    def _capture(self) -> tuple[int, list[dict[str, Any]]]:
        # Caller holds self._lock.
        self._version += 1
        return self._version, serialize_nodes(self._roots)

    def _changed(
        self,
        pending: tuple[int, list[dict[str, Any]]],
        kind: str,
        node: ConfigNode | None = None,
        parent: ConfigNode | None = None,
    ) -> None:
        # Runs outside self._lock: subscribers and state I/O never block readers.
        try:
            self._notify(kind, node, parent)
        finally:
            self._write_state(*pending)

    # ==================== Lookup ====================

    @staticmethod
    def _find_parent_in(
        nodes: list[ConfigNode], target: ConfigNode
    ) -> ConfigNode | None:
        for node in nodes:
            if not node.children:
                continue
            if any(child is target for child in node.children):
                return node
            found = ConfigTreeStore._find_parent_in(node.children, target)
            if found is not None:
                return found
        return None

    def find_parent(self, node: ConfigNode) -> ConfigNode | None:
        """Return the parent of node, or None for root nodes and strangers."""
        with self._lock:
            return self._find_parent_in(self._roots, node)

    def find(self, path: str) -> ConfigNode:
        """Return the node at a dotted path (leaf or parent).

        Raises:
            PathNotFoundError: If the path does not exist.
        """
        with self._lock:
            return find_node(self._roots, path)

    def resolve(self, path: str) -> str:
        """Return the value of the leaf at a dotted path.

        Raises:
            PathNotFoundError: If the path does not exist.
            NotALeafError: If the path names a parent.
        """
        with self._lock:
            return resolve_path(self._roots, path)

    def walk(self) -> Iterator[tuple[str, ConfigNode]]:
        """Yield (path, node) for every node, depth-first in tree order.

        Example:
            >>> for path, node in store.walk():
            ...     print(path, node.value)
        """
        def _walk_gen(
            nodes: list[ConfigNode], prefix: str
        ) -> Iterator[tuple[str, ConfigNode]]:
            for node in nodes:
                path = f"{prefix}.{node.label}" if prefix else node.label
                yield path, node
                if node.children:
                    yield from _walk_gen(list(node.children), path)

        return _walk_gen(self.get_root_items(), '')

    def generate_commands(self) -> list[CommandDescriptor]:
        """Return one input command descriptor per leaf, in tree order."""
        with self._lock:
            return generate_commands(self._roots)

    # ==================== Persistence ====================

    def snapshot(self) -> list[dict[str, Any]]:
        """Serialize the current tree under the lock."""
        with self._lock:
            return serialize_nodes(self._roots)

    def save_state(self) -> None:
        """Write the current tree to the state surface.

        Failures are logged and otherwise ignored: the in-memory tree
        stays authoritative.
        """
        with self._lock:
            pending = self._capture()
        self._write_state(*pending)

    def _write_state(self, version: int, data: list[dict[str, Any]]) -> None:
        # Writes are serialized and never go backwards: a snapshot older
        # than the last one written is dropped.
        if self.state is None:
            logger.warning("State surface not available for saving tree state")
            return
        with self._save_lock:
            if version <= self._saved_version:
                logger.debug("Skipped stale tree snapshot %d", version)
                return
            try:
                self.state.update(self.state_key, data)
            except (OSError, ValueError, TypeError):
                logger.exception("Failed to save tree state")
                return
            self._saved_version = version

    def load_state(self) -> bool:
        """Replace the tree with the one saved on the state surface.

        Returns:
            True if a saved tree was installed, False if there was none
            or it could not be read (the current tree is kept).
        """
        if self.state is None:
            logger.warning("State surface not available for loading tree state")
            return False
        try:
            data = self.state.get(self.state_key)
        except (OSError, ValueError):
            logger.exception("Failed to read tree state")
            return False
        if not data:
            return False
        try:
            nodes = deserialize_nodes(data)
        except ConfigTreeError:
            logger.exception("Failed to load tree state")
            return False

        with self._lock:
            self._roots = nodes
            self._version += 1
            logger.info("Loaded %d root item(s) from saved state", len(nodes))
        self._notify(REPLACE)
        return True

    def export_to_file(self, file_path: str | Path) -> Path:
        """Write the tree, wrapped in the export envelope, to file_path.

        Parent directories are created as needed.

        Returns:
            The path written.

        Raises:
            OSError: If the file cannot be written.
        """
        path = Path(file_path)
        with self._lock:
            envelope = build_envelope(self._roots)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dumps(envelope, indent=self.export_indent), encoding='utf-8')
        except OSError:
            logger.error("Failed to export tree state to %s", path)
            raise
        logger.info("Exported tree to %s", path)
        return path

    def import_from_file(self, file_path: str | Path) -> list[ConfigNode]:
        """Replace the tree with the one stored in file_path.

        The file is fully read and parsed before the current tree is
        touched, so any failure leaves it as it was.

        Returns:
            The new root nodes.

        Raises:
            OSError: If the file cannot be read.
            InvalidFormatError: If the content is not a valid tree payload.
        """
        path = Path(file_path)
        text = path.read_text(encoding='utf-8')
        nodes = parse_payload(loads(text))
        self.update_data(nodes)
        logger.info("Imported %d root item(s) from %s", len(nodes), path)
        return nodes


def _checked_roots(nodes: Iterable[ConfigNode]) -> list[ConfigNode]:
    """Return nodes as a list, rejecting any node reachable twice."""
    roots = list(nodes)
    seen: set[int] = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if id(node) in seen:
            raise ValueError(f"Node {node.label!r} appears more than once in the tree")
        seen.add(id(node))
        stack.extend(node.children or ())
    return roots
