# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DebugConfigs - Hierarchical configuration values addressed by dotted paths.

Folders and leaf values live in a small tree that is auto-saved, exported
and imported as JSON, and resolved by case-insensitive dotted paths
('environment.development.port') for editor input commands.
"""

__version__ = "0.1.0"

from .commands import CommandDescriptor, generate_commands, render_stanzas
from .exceptions import (
    ConfigTreeError,
    HasChildrenError,
    InvalidFormatError,
    InvalidLabelError,
    InvalidValueTypeError,
    NotALeafError,
    PathNotFoundError,
    ResolutionError,
)
from .node import ConfigNode
from .persistence import JsonFileState, MemoryState
from .resolver import find_node, resolve_path
from .serialization import deserialize_nodes, serialize_nodes
from .store import ChangeEvent, ConfigTreeStore

__all__ = [
    # Core classes
    "ConfigNode",
    "ConfigTreeStore",
    "ChangeEvent",
    # State surfaces
    "MemoryState",
    "JsonFileState",
    # Functions
    "resolve_path",
    "find_node",
    "serialize_nodes",
    "deserialize_nodes",
    "generate_commands",
    "render_stanzas",
    "CommandDescriptor",
    # Exceptions
    "ConfigTreeError",
    "InvalidLabelError",
    "InvalidValueTypeError",
    "HasChildrenError",
    "ResolutionError",
    "PathNotFoundError",
    "NotALeafError",
    "InvalidFormatError",
]
