#!/usr/bin/env python3
"""
Configuration loading for gitgate.

Implements cascading configuration:
1. Global defaults (~/.gitgate/gitgate.yaml)
2. Project config (.gitgate/gitgate.yaml) - committed to repo
3. Local overrides (.gitgate/gitgate.local.yaml) - gitignored

The minimum git version is deliberately not configurable.
"""
import copy
import os
import sys
from pathlib import Path
from typing import Optional

import yaml


CONFIG_DIR_NAME = '.gitgate'
CONFIG_FILE_NAME = 'gitgate.yaml'
LOCAL_CONFIG_FILE_NAME = 'gitgate.local.yaml'

SKIP_ENV_VAR = 'GITGATE_SKIP'

DEFAULT_CONFIG = {
    'enabled': True,
    'git': {
        'command': 'git',
    },
    'logging': {
        'level': 'error',
        'destinations': ['file'],
    },
    'console': {
        'level': 'info',
        'destinations': ['stderr'],
    },
}


def global_config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


def load_yaml(path: Path) -> dict:
    """
    Load one YAML config layer.

    Args:
        path: Path to config file

    Returns:
        Parsed mapping, or an empty dict if the file is missing, empty,
        unparseable or not a mapping (a warning is printed for the last two)
    """
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        print(f"⚠️ Could not load {path}: {e}", file=sys.stderr)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        print(f"⚠️ Ignoring {path}: top level must be a mapping", file=sys.stderr)
        return {}
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge override into base dictionary.

    Recursively merges nested dictionaries. Non-dict values are replaced.

    Args:
        base: Base dictionary (modified in place)
        override: Dictionary with values to merge

    Returns:
        Merged dictionary (same as base)
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def skip_requested() -> bool:
    """True when GITGATE_SKIP is set to a truthy value."""
    return os.environ.get(SKIP_ENV_VAR, '').strip().lower() in {'1', 'true', 'yes'}


class GateConfig:
    """
    Configuration manager for gitgate.

    Loads and merges configuration from global, project, and local sources,
    then validates it. Invalid values are reported in `validation_errors`
    and replaced with defaults rather than aborting the check.
    """

    # (path, expected type) pairs; list entries are checked element-wise
    SCHEMA = {
        ('enabled',): bool,
        ('git',): dict,
        ('git', 'command'): str,
        ('logging',): dict,
        ('logging', 'level'): str,
        ('logging', 'destinations'): list,
        ('logging', 'file'): str,
        ('console',): dict,
        ('console', 'level'): str,
        ('console', 'destinations'): list,
        ('console', 'file'): str,
    }

    def __init__(self, project_dir: Optional[str] = None):
        """
        Initialize config for project.

        Args:
            project_dir: Project root directory (defaults to cwd)
        """
        self.project_dir = project_dir or os.getcwd()
        self.validation_errors: list[str] = []
        self.sources: list[Path] = []
        self._config = self._load_cascade()

    def _layer_paths(self) -> list[tuple[str, Path]]:
        project = Path(self.project_dir) / CONFIG_DIR_NAME
        return [
            ('global', global_config_dir() / CONFIG_FILE_NAME),
            ('project', project / CONFIG_FILE_NAME),
            ('local', project / LOCAL_CONFIG_FILE_NAME),
        ]

    def _load_cascade(self) -> dict:
        config = copy.deepcopy(DEFAULT_CONFIG)

        for layer, path in self._layer_paths():
            data = load_yaml(path)
            if not data:
                continue
            self.sources.append(path)

            if layer == 'project' and data.get('inherit', True) is False:
                # Drop global settings, keep built-in defaults
                config = copy.deepcopy(DEFAULT_CONFIG)
            data = {k: v for k, v in data.items() if k != 'inherit'}
            deep_merge(config, data)

        self._validate(config)
        return config

    def _validate(self, config: dict) -> None:
        for path, expected in self.SCHEMA.items():
            parent = config
            for key in path[:-1]:
                parent = parent.get(key) if isinstance(parent, dict) else None
            if not isinstance(parent, dict) or path[-1] not in parent:
                continue

            value = parent[path[-1]]
            if isinstance(value, expected) and not (expected is list and not _all_strings(value)):
                continue

            dotted = '.'.join(path)
            self.validation_errors.append(
                f"'{dotted}' must be {_describe(expected)}, got {type(value).__name__}"
            )
            default = DEFAULT_CONFIG
            for key in path:
                default = default.get(key) if isinstance(default, dict) else None
            if default is None:
                del parent[path[-1]]
            else:
                parent[path[-1]] = copy.deepcopy(default)

        for error in self.validation_errors:
            print(f"⚠️ Config validation error: {error}", file=sys.stderr)

    def get_validation_errors(self) -> list[str]:
        return list(self.validation_errors)

    def is_enabled(self) -> bool:
        """Whether the git check should run (config flag and GITGATE_SKIP)."""
        return bool(self._config.get('enabled', True)) and not skip_requested()

    def get_git_command(self) -> str:
        return self._config.get('git', {}).get('command') or 'git'

    def get_logging_config(self) -> dict:
        return dict(self._config.get('logging', {}))

    def get_console_config(self) -> dict:
        return dict(self._config.get('console', {}))

    def get_raw_config(self) -> dict:
        """Full merged config (a copy; safe to mutate)."""
        return copy.deepcopy(self._config)


def _all_strings(value: list) -> bool:
    return all(isinstance(item, str) for item in value)


def _describe(expected: type) -> str:
    return {
        bool: 'a boolean',
        str: 'a string',
        dict: 'a mapping',
        list: 'a list of strings',
    }.get(expected, expected.__name__)
