# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Dotted path resolution.

Paths are '.'-separated label sequences matched case-insensitively at
every level. When siblings differ only by case, the first one in tree
order wins.

Example:
    >>> resolve_path(roots, 'environment.development.port')
    '3000'
"""

from __future__ import annotations

from typing import Sequence

from .exceptions import NotALeafError, PathNotFoundError
from .node import PATH_SEPARATOR, ConfigNode


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments.

    Raises:
        PathNotFoundError: If path is empty.
    """
    if not isinstance(path, str) or not path:
        raise PathNotFoundError(str(path), '', reason='missing')
    return path.split(PATH_SEPARATOR)


def _match(nodes: Sequence[ConfigNode], segment: str) -> ConfigNode | None:
    wanted = segment.lower()
    for node in nodes:
        if node.label.lower() == wanted:
            return node
    return None


def find_node(roots: Sequence[ConfigNode], path: str) -> ConfigNode:
    """Walk a dotted path and return the node it names.

    Unlike resolve_path, the target may be a parent.

    Args:
        roots: The root node list.
        path: Dotted, case-insensitive path.

    Raises:
        PathNotFoundError: If a segment is missing, or an intermediate
            segment matches a node without children.
    """
    parts = split_path(path)
    current: Sequence[ConfigNode] = roots
    node: ConfigNode | None = None

    for i, part in enumerate(parts):
        node = _match(current, part)
        if node is None:
            raise PathNotFoundError(path, part, reason='missing')
        if i < len(parts) - 1:
            if not node.children:
                raise PathNotFoundError(path, part, reason='no_children')
            current = node.children

    return node


def resolve_path(roots: Sequence[ConfigNode], path: str) -> str:
    """Resolve a dotted path to the text value of a leaf.

    Raises:
        PathNotFoundError: If the path does not exist.
        NotALeafError: If the path names a node without a value.
    """
    node = find_node(roots, path)
    if node.value is None:
        raise NotALeafError(path)
    return node.value
