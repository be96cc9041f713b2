# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Input command descriptors generated from tree leaves.

Every leaf becomes one descriptor whose id is its dotted path. An editor
configuration (launch.json, tasks.json) lists the descriptors under
``inputs`` and refers to them as ``${input:<id>}``; when the input is
evaluated the editor calls the resolve entry point with the path.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Sequence

from .node import PATH_SEPARATOR, ConfigNode

RESOLVE_COMMAND = 'extension.debugconfigs.replace'


@dataclass(frozen=True)
class CommandDescriptor:
    """One generated input command.

    Attributes:
        id: Dotted path of the leaf, used as the input id.
        path: Path argument passed to the resolve entry point. Same as id.
    """

    id: str
    path: str

    def as_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'type': 'command',
            'command': RESOLVE_COMMAND,
            'args': {'path': self.path},
        }


def iter_leaf_paths(
    nodes: Sequence[ConfigNode], prefix: str = ''
) -> Iterator[tuple[str, ConfigNode]]:
    """Yield (dotted_path, leaf) pairs depth-first in tree order."""
    for node in nodes:
        path = f"{prefix}{PATH_SEPARATOR}{node.label}" if prefix else node.label
        if node.value is not None:
            yield path, node
        elif node.children:
            yield from iter_leaf_paths(node.children, path)


def generate_commands(nodes: Sequence[ConfigNode]) -> list[CommandDescriptor]:
    """Return a descriptor for every leaf under nodes, in tree order."""
    return [CommandDescriptor(path, path) for path, _ in iter_leaf_paths(nodes)]


def replace_command(store: Any, args: Mapping[str, Any] | None) -> str:
    """Resolve entry point invoked with ``{'path': ...}``.

    Args:
        store: Anything with a ``resolve(path)`` method.
        args: The command arguments.

    Raises:
        ValueError: If no path argument is given.
        PathNotFoundError, NotALeafError: As raised by store.resolve.
    """
    if not args or not args.get('path'):
        raise ValueError('Path argument is required for debugconfigs.replace command')
    return store.resolve(args['path'])


def render_stanzas(commands: Iterable[CommandDescriptor]) -> str:
    """Render descriptors as a JSONC array ready to paste under ``inputs``.

    Each entry is preceded by a comment showing how to reference it.

    Example:
        >>> print(render_stanzas([CommandDescriptor('a.b', 'a.b')]))
        [
          // use this: ${input:a.b}
          {
            "id": "a.b",
        ...
    """
    commands = list(commands)
    lines = ['[']
    for i, command in enumerate(commands):
        body = json.dumps(command.as_dict(), indent=2).replace('\n', '\n  ')
        lines.append(f"  // use this: ${{input:{command.id}}}")
        lines.append(f"  {body}{',' if i < len(commands) - 1 else ''}")
    lines.append(']')
    return '\n'.join(lines)


def merge_inputs(
    config: Mapping[str, Any], commands: Iterable[CommandDescriptor]
) -> list[CommandDescriptor]:
    """Return the descriptors whose id is not already in config['inputs']."""
    existing = {
        entry.get('id')
        for entry in config.get('inputs') or []
        if isinstance(entry, Mapping)
    }
    return [command for command in commands if command.id not in existing]


def apply_inputs(
    config: Mapping[str, Any], commands: Iterable[CommandDescriptor]
) -> tuple[dict[str, Any], list[CommandDescriptor]]:
    """Append missing descriptors to a copy of config['inputs'].

    Returns:
        Tuple of (updated_config, added_descriptors). config is not modified.
    """
    added = merge_inputs(config, commands)
    updated = dict(config)
    updated['inputs'] = list(config.get('inputs') or []) + [c.as_dict() for c in added]
    return updated, added
