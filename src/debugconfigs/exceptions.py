# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DebugConfigs exceptions."""

from __future__ import annotations


class ConfigTreeError(Exception):
    """Base exception for configuration tree errors."""

    pass


class InvalidLabelError(ConfigTreeError, ValueError):
    """Raised when a label is empty or contains the path separator."""

    pass


class InvalidValueTypeError(ConfigTreeError, TypeError):
    """Raised when a non-scalar value is assigned to a node."""

    pass


class HasChildrenError(ConfigTreeError, ValueError):
    """Raised when a value is set on a node that still owns children."""

    pass


class ResolutionError(ConfigTreeError, LookupError):
    """Base class for dotted path resolution failures.

    Attributes:
        path: The path that was being resolved.
    """

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class PathNotFoundError(ResolutionError):
    """Raised when a path segment is missing or cannot be descended into.

    Attributes:
        segment: The segment where resolution stopped.
        reason: 'missing' if no sibling matched the segment,
            'no_children' if it matched a node without children.
    """

    def __init__(self, path: str, segment: str, reason: str = 'missing') -> None:
        if reason == 'no_children':
            message = f'Path "{path}" not found: "{segment}" has no children'
        else:
            message = f'Path "{path}" not found: "{segment}" does not exist'
        super().__init__(message, path)
        self.segment = segment
        self.reason = reason


class NotALeafError(ResolutionError):
    """Raised when a path resolves to a node that holds no value."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f'Path "{path}" does not point to a leaf node with a value', path
        )


class InvalidFormatError(ConfigTreeError, ValueError):
    """Raised when an import payload does not have a recognised shape."""

    pass


class ConfigError(ConfigTreeError, ValueError):
    """Raised when a settings file cannot be loaded."""

    pass
