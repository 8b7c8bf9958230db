"""
Messages Module for gitgate.

Loads the guidance text shown when the git requirement is not met, with
cascade priority:
  local > project > global > built-in defaults

Example directory structure:
    ~/.gitgate/messages.yaml                  # Global overrides
    <project>/.gitgate/messages.yaml          # Project-specific (version controlled)
    <project>/.gitgate/messages.local.yaml    # Local overrides (gitignored)

Each file is a flat mapping of message key to template. Files may override
any subset of keys. Templates may use {minimum} and {error} placeholders.
"""
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from config import CONFIG_DIR_NAME, global_config_dir


class MessageValidationError(Exception):
    """Raised when a messages file fails validation."""

    def __init__(self, file_path: Path, errors: List[str]):
        self.file_path = file_path
        self.errors = errors
        errors_str = "\n  - ".join(errors)
        super().__init__(
            f"Messages file validation failed for '{file_path}':\n  - {errors_str}"
        )


@dataclass(frozen=True)
class GateMessages:
    """
    All message variants used by the git check.

    Attributes:
        exec_failed: Logged at error level when `git --version` cannot run
        not_installed: Shown by the CLI when git is missing or unparseable
        version_too_low: Logged at error level when git is older than the minimum
        how_to_install: Logged at info level with install/upgrade guidance
    """
    exec_failed: str
    not_installed: str
    version_too_low: str
    how_to_install: str

    def format(self, **kwargs) -> 'GateMessages':
        """
        Return new instance with {var} placeholders substituted.

        Unknown placeholders are left unchanged.
        """
        return GateMessages(**{
            name: _safe_format(value, **kwargs)
            for name, value in self.to_dict().items()
        })

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_MESSAGES = GateMessages(
    exec_failed="Error when checking if git is installed: {error}",
    not_installed="git not found. Please check and try again",
    version_too_low="Your current git version is lower than the minimum required: {minimum}",
    how_to_install=(
        "Git {minimum} or newer is required. Install or upgrade it from "
        "https://git-scm.com/downloads (Linux: use your package manager, "
        "macOS: `brew install git` or `xcode-select --install`), then run "
        "`git --version` to confirm."
    ),
)

MESSAGE_KEYS = frozenset(DEFAULT_MESSAGES.to_dict())

_PLACEHOLDER = re.compile(r'\{([a-zA-Z_][a-zA-Z0-9_]*)\}')


def _safe_format(template: str, **kw) -> str:
    def replacer(match):
        key = match.group(1)
        return str(kw[key]) if key in kw else match.group(0)

    return _PLACEHOLDER.sub(replacer, template)


def message_paths(project_dir: Optional[str]) -> List[Path]:
    """Messages files in load order (lowest priority first)."""
    paths = [global_config_dir() / 'messages.yaml']
    if project_dir:
        project = Path(project_dir) / CONFIG_DIR_NAME
        paths.append(project / 'messages.yaml')
        paths.append(project / 'messages.local.yaml')
    return paths


def validate_messages_file(path: Path, data: object) -> Dict[str, str]:
    """
    Check a parsed messages file.

    Raises:
        MessageValidationError: On a non-mapping document, unknown keys or
            non-string values
    """
    if not isinstance(data, dict):
        raise MessageValidationError(path, [f"expected a mapping, got {type(data).__name__}"])

    errors = []
    for key, value in data.items():
        if key not in MESSAGE_KEYS:
            errors.append(f"unknown message key '{key}' (expected one of: {', '.join(sorted(MESSAGE_KEYS))})")
        elif not isinstance(value, str):
            errors.append(f"'{key}' must be a string, got {type(value).__name__}")
    if errors:
        raise MessageValidationError(path, errors)
    return data


def load_messages(project_dir: Optional[str] = None) -> GateMessages:
    """
    Load messages through the cascade.

    Args:
        project_dir: Project root; None loads global overrides only

    Returns:
        GateMessages with every field populated

    Raises:
        MessageValidationError: If any messages file is invalid
    """
    messages = DEFAULT_MESSAGES
    for path in message_paths(project_dir):
        if not path.exists():
            continue
        try:
            data = yaml.safe_load(path.read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError) as e:
            raise MessageValidationError(path, [f"could not read file: {e}"]) from e
        except yaml.YAMLError as e:
            raise MessageValidationError(path, [f"YAML parse error: {e}"]) from e
        if data is None:
            continue
        messages = replace(messages, **validate_messages_file(path, data))
    return messages
