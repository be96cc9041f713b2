# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Conversion between configuration trees and JSON-compatible data.

Node shape::

    {"label": str, "value"?: str, "children"?: [node, ...]}

Leaves carry ``value``, parents with children carry ``children``, and
an empty parent carries only its label.

Export envelope::

    {"version": "1.0", "exportedAt": "<ISO-8601>", "treeState": [node, ...]}

Imports accept either the envelope or a bare node list (legacy format).
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Sequence

from .exceptions import (
    ConfigTreeError,
    HasChildrenError,
    InvalidFormatError,
    InvalidValueTypeError,
)
from .node import ConfigNode

FORMAT_VERSION = '1.0'


def serialize_nodes(nodes: Sequence[ConfigNode]) -> list[dict[str, Any]]:
    """Convert nodes (recursively) to a list of plain dicts, preserving order."""
    result: list[dict[str, Any]] = []
    for node in nodes:
        data: dict[str, Any] = {'label': node.label}
        if node.value is not None:
            data['value'] = node.value
        if node.children:
            data['children'] = serialize_nodes(node.children)
        result.append(data)
    return result


def deserialize_nodes(data: Any) -> list[ConfigNode]:
    """Rebuild nodes from the list produced by serialize_nodes.

    The whole list is built before anything is returned, so a failure
    anywhere leaves the caller with nothing to install.

    Raises:
        InvalidLabelError: If any label is empty or contains a dot.
        InvalidFormatError: If the data does not have the node shape.
    """
    if not isinstance(data, list):
        raise InvalidFormatError(
            f"Expected a list of nodes, got {type(data).__name__}"
        )
    return [_deserialize_node(item) for item in data]


def _deserialize_node(item: Any) -> ConfigNode:
    if not isinstance(item, dict):
        raise InvalidFormatError(f"Expected a node object, got {type(item).__name__}")
    if 'label' not in item:
        raise InvalidFormatError(f"Node is missing 'label': {item!r}")

    value = item.get('value')
    raw_children = item.get('children')
    if raw_children is not None and not isinstance(raw_children, list):
        raise InvalidFormatError(
            f"'children' of {item['label']!r} must be a list, "
            f"got {type(raw_children).__name__}"
        )

    children = deserialize_nodes(raw_children) if raw_children else None
    try:
        return ConfigNode(item['label'], value=value, children=children)
    except (HasChildrenError, InvalidValueTypeError) as exc:
        raise InvalidFormatError(str(exc)) from exc


def build_envelope(
    nodes: Sequence[ConfigNode], exported_at: datetime | None = None
) -> dict[str, Any]:
    """Wrap serialized nodes in the versioned export envelope."""
    if exported_at is None:
        exported_at = datetime.now(timezone.utc)
    return {
        'version': FORMAT_VERSION,
        'exportedAt': _isoformat(exported_at),
        'treeState': serialize_nodes(nodes),
    }


def _isoformat(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec='milliseconds')
    return text.replace('+00:00', 'Z')


def parse_payload(data: Any) -> list[ConfigNode]:
    """Build nodes from an import payload.

    Accepts the export envelope or a bare node list. Any structural
    problem, including an invalid label, is reported as
    InvalidFormatError with the original error chained.

    Raises:
        InvalidFormatError: If the payload cannot be turned into a tree.
    """
    if isinstance(data, dict) and isinstance(data.get('treeState'), list):
        tree_state = data['treeState']
    elif isinstance(data, list):
        tree_state = data
    else:
        raise InvalidFormatError(
            "Invalid JSON format. Expected an object with a 'treeState' "
            "array or a bare array of nodes."
        )

    try:
        return deserialize_nodes(tree_state)
    except InvalidFormatError:
        raise
    except ConfigTreeError as exc:
        raise InvalidFormatError(f"Invalid tree data: {exc}") from exc


def dumps(data: Any, indent: int | None = 2) -> str:
    """Format data as JSON text."""
    return json.dumps(data, indent=indent, ensure_ascii=False)


def loads(text: str) -> Any:
    """Parse JSON text.

    Raises:
        InvalidFormatError: If text is not valid JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidFormatError(f"Invalid JSON: {exc}") from exc
