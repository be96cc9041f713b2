# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Command-line front end for a saved configuration tree.

Usage:
    debugconfigs show
    debugconfigs add-root Environment
    debugconfigs add-child Environment Development
    debugconfigs add-child Environment.Development port --value 3000
    debugconfigs resolve environment.development.port
    debugconfigs generate --format jsonc
    debugconfigs export tree.json
    debugconfigs import tree.json

Each invocation loads the tree from the state file, runs one operation
and lets auto-save write the result back.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Sequence, TextIO

from . import __version__
from .commands import apply_inputs, render_stanzas
from .config import Settings, load_settings
from .exceptions import ConfigTreeError
from .node import ConfigNode
from .persistence import JsonFileState
from .serialization import dumps, loads
from .store import ConfigTreeStore

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str | int = logging.WARNING, log_file: Path | None = None) -> None:
    """Configure the 'debugconfigs' logger for command-line use."""
    root = logging.getLogger('debugconfigs')
    root.setLevel(level)
    if root.hasHandlers():
        root.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # 5MB per file, 5 backups
        file_handler = RotatingFileHandler(
            log_file, maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def format_tree(store: ConfigTreeStore) -> str:
    """Render the tree as an indented outline, values after the label."""
    lines = []
    for path, node in store.walk():
        depth = path.count('.')
        caption = f" = {node.description}" if node.description is not None else ''
        marker = '-' if node.is_leaf else '+'
        lines.append(f"{'  ' * depth}{marker} {node.label}{caption}")
    return '\n'.join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='debugconfigs',
        description='Manage a tree of configuration values resolved by dotted paths.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', type=Path, help='YAML or JSON settings file')
    parser.add_argument('--state', type=Path, help='state file (overrides settings)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='increase log verbosity (-v info, -vv debug)')

    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('show', help='print the tree')

    p = sub.add_parser('add-root', help='add a root item')
    p.add_argument('label')

    p = sub.add_parser('add-child', help='add a child under PATH')
    p.add_argument('path')
    p.add_argument('label')
    p.add_argument('--value', help='create a leaf with this value')

    p = sub.add_parser('set', help='set the value of the node at PATH')
    p.add_argument('path')
    p.add_argument('value')

    p = sub.add_parser('remove', help='remove the node at PATH')
    p.add_argument('path')

    sub.add_parser('clear', help='remove every node')

    p = sub.add_parser('resolve', help='print the value of the leaf at PATH')
    p.add_argument('path')

    p = sub.add_parser('export', help='export the tree to FILE')
    p.add_argument('file', type=Path)

    p = sub.add_parser('import', help='replace the tree with the content of FILE')
    p.add_argument('file', type=Path)

    p = sub.add_parser('generate', help='print input command descriptors')
    p.add_argument('--format', choices=('json', 'jsonc'), default='jsonc')

    p = sub.add_parser('add-inputs', help='list (or add) inputs missing from a launch/tasks file')
    p.add_argument('file', type=Path)
    p.add_argument('--write', action='store_true',
                   help='rewrite FILE with the missing inputs appended (plain JSON only)')

    return parser


def _open_store(settings: Settings) -> ConfigTreeStore:
    store = ConfigTreeStore(
        state=JsonFileState(settings.state_file),
        state_key=settings.state_key,
        export_indent=settings.export_indent,
    )
    store.load_state()
    return store


def _run(args: argparse.Namespace, store: ConfigTreeStore, out: TextIO) -> None:
    command = args.command

    if command == 'show':
        text = format_tree(store)
        if text:
            print(text, file=out)
    elif command == 'add-root':
        store.add_root_item(args.label)
    elif command == 'add-child':
        parent: ConfigNode = store.find(args.path)
        store.add_child_to_item(parent, args.label, args.value)
    elif command == 'set':
        store.set_item_value(store.find(args.path), args.value)
    elif command == 'remove':
        store.remove_item(store.find(args.path))
    elif command == 'clear':
        store.clear()
    elif command == 'resolve':
        print(store.resolve(args.path), file=out)
    elif command == 'export':
        path = store.export_to_file(args.file)
        print(f"Tree exported successfully to {path}", file=out)
    elif command == 'import':
        store.import_from_file(args.file)
        print(f"Tree imported successfully from {args.file}", file=out)
    elif command == 'generate':
        commands = store.generate_commands()
        if args.format == 'json':
            print(dumps([c.as_dict() for c in commands]), file=out)
        else:
            print(render_stanzas(commands), file=out)
    elif command == 'add-inputs':
        config = loads(args.file.read_text(encoding='utf-8'))
        if not isinstance(config, dict):
            raise ConfigTreeError(f"{args.file} does not contain a JSON object")
        updated, added = apply_inputs(config, store.generate_commands())
        if not added:
            print("All input commands already exist in the configuration file.", file=out)
            return
        if args.write:
            args.file.write_text(json.dumps(updated, indent=2) + '\n', encoding='utf-8')
            print(f"Added {len(added)} input command(s) to {args.file}", file=out)
        else:
            print(render_stanzas(added), file=out)


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    """Entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    out = out if out is not None else sys.stdout

    try:
        settings = load_settings(args.config)
    except ConfigTreeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if args.state is not None:
        settings = replace(settings, state_file=args.state)

    level = settings.log_level
    if args.verbose:
        level = 'DEBUG' if args.verbose > 1 else 'INFO'
    setup_logging(level, settings.log_file)

    try:
        store = _open_store(settings)
        _run(args, store, out)
    except (ConfigTreeError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
