# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Configuration tree node.

A ConfigNode is either a leaf (holds a text value) or a parent (holds an
ordered list of children), never both. A node with neither is an empty
parent: the legal state of a freshly created folder before its first
child is added.

Whether a node is a leaf is derived from the data (value is not None),
never stored separately.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

from .exceptions import HasChildrenError, InvalidLabelError, InvalidValueTypeError

PATH_SEPARATOR = '.'

# Expansion hints for the UI collaborator
EXPANSION_NONE = 'none'
EXPANSION_COLLAPSED = 'collapsed'


def validate_label(label: Any) -> str:
    """Check that a label can be used as a path segment.

    Args:
        label: Candidate label.

    Returns:
        The label, unchanged.

    Raises:
        InvalidLabelError: If label is not a non-empty string or contains
            the path separator.
    """
    if not isinstance(label, str) or not label:
        raise InvalidLabelError(f"Label must be a non-empty string, got {label!r}")
    if PATH_SEPARATOR in label:
        raise InvalidLabelError(
            f"Label {label!r} cannot contain dots (.) as they are used for path navigation"
        )
    return label


def _format_float(value: float) -> str:
    """Format a finite float the way a JavaScript number prints.

    Uses the shortest round-trip digits, plain notation for magnitudes in
    [1e-6, 1e21) and ``1.5e+21`` / ``1e-7`` style otherwise.
    """
    if value == 0:
        return '0'
    sign = '-' if value < 0 else ''
    mantissa, _, exp = repr(abs(value)).partition('e')
    int_part, _, frac_part = mantissa.partition('.')
    digits = (int_part + frac_part).lstrip('0').rstrip('0')
    if int_part.strip('0'):
        point = len(int_part) + int(exp or 0)
    else:
        point = int(exp or 0) - (len(frac_part) - len(frac_part.lstrip('0')))

    # value == 0.<digits> * 10 ** point
    count = len(digits)
    if count <= point <= 21:
        text = digits + '0' * (point - count)
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = f"0.{'0' * -point}{digits}"
    else:
        exponent = point - 1
        head = digits if count == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{head}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
    return sign + text


def stringify_value(value: Any) -> str:
    """Convert a scalar to the text form stored on leaves.

    Booleans become 'true'/'false' and floats print like JavaScript
    numbers (integral floats drop their fractional part, 1e21 becomes
    '1e+21'), so values read back the same way the consumer of the
    resolved text expects them.

    Raises:
        InvalidValueTypeError: If value is not str, int, float or bool.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        return _format_float(value)
    raise InvalidValueTypeError(
        f"Invalid value type: {type(value).__name__}. "
        "Only primitive types (str, int, float, bool) are allowed."
    )


class ConfigNode:
    """A node in a configuration tree.

    Each node has:
    - label: Name used as a path segment (no dots)
    - value: Text value for leaves, None otherwise
    - children: Ordered list of child nodes for parents, None otherwise

    Example:
        >>> env = ConfigNode.create_parent('Environment')
        >>> env.add_child(ConfigNode.create_leaf('port', 3000))
        >>> env.children[0].value
        '3000'
    """

    __slots__ = ('label', '_value', '_children')

    def __init__(
        self,
        label: str,
        value: Any = None,
        children: Iterable[ConfigNode] | None = None,
    ) -> None:
        """Initialize a ConfigNode.

        Args:
            label: The node's label.
            value: Optional scalar value, stored as text.
            children: Optional initial children.

        Raises:
            InvalidLabelError: If the label is invalid.
            HasChildrenError: If both a value and children are given.
            ValueError: If the same child is given twice.
        """
        self.label = validate_label(label)
        self._value: str | None = None
        self._children: list[ConfigNode] | None = None

        children = list(children) if children is not None else []
        if value is not None and children:
            raise HasChildrenError(
                f"Node {label!r} cannot hold both a value and children"
            )
        if value is not None:
            self._value = stringify_value(value)
        for child in children:
            self.add_child(child)

    @classmethod
    def create_leaf(cls, label: str, value: Any) -> ConfigNode:
        """Create a leaf node holding value."""
        return cls(label, value=value)

    @classmethod
    def create_parent(
        cls, label: str, children: Iterable[ConfigNode] | None = None
    ) -> ConfigNode:
        """Create a parent node, empty unless children are given."""
        return cls(label, children=children)

    def __repr__(self) -> str:
        if self._children:
            return f"ConfigNode({self.label!r}, children={len(self._children)})"
        return f"ConfigNode({self.label!r}, value={self._value!r})"

    # ==================== State ====================

    @property
    def value(self) -> str | None:
        """Text value of a leaf, None for parents."""
        return self._value

    @property
    def children(self) -> list[ConfigNode] | None:
        """Children of a parent, None when there are none."""
        return self._children

    @property
    def is_leaf(self) -> bool:
        """True if this node holds a value."""
        return self._value is not None

    @property
    def is_parent(self) -> bool:
        """True if this node holds no value (it may have no children yet)."""
        return self._value is None

    @property
    def has_children(self) -> bool:
        return bool(self._children)

    @property
    def expansion(self) -> str:
        """Expansion hint: collapsed when there are children, none otherwise."""
        return EXPANSION_COLLAPSED if self._children else EXPANSION_NONE

    @property
    def context_value(self) -> str:
        """Leaf/parent discriminator used by the UI to pick actions."""
        return 'leaf' if self.is_leaf else 'parent'

    @property
    def description(self) -> str | None:
        """Display caption shown next to the label (the value of a leaf)."""
        return self._value

    @property
    def tooltip(self) -> str | None:
        if self._value is None:
            return None
        return f"{self.label}: {self._value}"

    # ==================== Mutation ====================

    def set_value(self, value: Any) -> None:
        """Assign a scalar value, turning this node into a leaf.

        Args:
            value: A str, int, float or bool; stored as text.

        Raises:
            InvalidValueTypeError: If value is not a supported scalar.
            HasChildrenError: If this node currently has children.
        """
        text = stringify_value(value)
        if self._children:
            raise HasChildrenError(
                f"Cannot set value for {self.label!r} because it has children. "
                "Remove all children first."
            )
        self._value = text
        self._children = None

    def add_child(self, child: ConfigNode) -> None:
        """Append a child, turning this node into a parent.

        Any value held by this node is discarded.

        Raises:
            TypeError: If child is not a ConfigNode.
            ValueError: If child is this node, one of its ancestors, or
                already one of its children.
        """
        if not isinstance(child, ConfigNode):
            raise TypeError(f"child must be ConfigNode, not {type(child).__name__}")
        if self._children and any(c is child for c in self._children):
            raise ValueError(f"{child.label!r} is already a child of {self.label!r}")
        if child._subtree_contains(self):
            raise ValueError(
                f"Cannot add {child.label!r} under {self.label!r}: it would create a cycle"
            )
        if self._children is None:
            self._children = []
        self._children.append(child)
        self._value = None

    def _subtree_contains(self, target: ConfigNode) -> bool:
        stack = [self]
        while stack:
            node = stack.pop()
            if node is target:
                return True
            stack.extend(node._children or ())
        return False

    def remove_child(self, child: ConfigNode) -> bool:
        """Remove a direct child by identity.

        When the last child is removed the node becomes an empty parent;
        it is not turned back into a leaf.

        Returns:
            True if the child was found and removed, False otherwise.
        """
        if not self._children:
            return False
        for i, candidate in enumerate(self._children):
            if candidate is child:
                del self._children[i]
                break
        else:
            return False
        if not self._children:
            self._children = None
        return True
