# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Settings for the command-line collaborator.

Settings come from built-in defaults, an optional YAML or JSON file, and
finally environment variables, in that order of precedence (last wins).

Environment variables:
    DEBUGCONFIGS_STATE_FILE: Path of the auto-save state file.
    DEBUGCONFIGS_LOG_LEVEL: Logging level name.
    DEBUGCONFIGS_LOG_FILE: Optional rotating log file.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .store.core import STATE_KEY

ENV_PREFIX = 'DEBUGCONFIGS_'


@dataclass(frozen=True)
class Settings:
    state_file: Path = Path('.debugconfigs') / 'state.json'
    state_key: str = STATE_KEY
    export_indent: int = 2
    log_level: str = 'WARNING'
    log_file: Path | None = None


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")

    text = path.read_text(encoding='utf-8')
    suffix = path.suffix.lower()
    try:
        if suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(text)
        elif suffix == '.json':
            data = json.loads(text) if text.strip() else None
        else:
            raise ConfigError(f"Unsupported settings format: {path.suffix or path.name}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot parse settings file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Settings root must be a mapping, got {type(data).__name__}"
        )
    return data


def _coerce(values: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

    result = dict(values)
    if result.get('state_file') is not None:
        result['state_file'] = Path(result['state_file'])
    if result.get('log_file') is not None:
        result['log_file'] = Path(result['log_file'])
    if 'export_indent' in result:
        try:
            result['export_indent'] = int(result['export_indent'])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"export_indent must be an integer: {exc}") from exc
    if 'log_level' in result:
        result['log_level'] = str(result['log_level']).upper()
    return result


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build Settings from defaults, an optional file and the environment.

    Args:
        path: Optional YAML (.yaml/.yml) or JSON settings file.
        environ: Environment mapping, os.environ by default.

    Raises:
        ConfigError: If the file is missing, unparsable, not a mapping,
            or names unknown settings.
    """
    if environ is None:
        environ = os.environ

    settings = Settings()
    if path is not None:
        settings = replace(settings, **_coerce(_load_file(Path(path))))

    overrides = {}
    for name in ('state_file', 'log_level', 'log_file'):
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value:
            overrides[name] = value
    if overrides:
        settings = replace(settings, **_coerce(overrides))
    return settings
