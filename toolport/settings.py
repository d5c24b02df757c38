"""
Settings loading for the toolport CLI.

Settings come from up to three JSON files, lowest precedence first:

    user       ~/.toolport/settings.json
    workspace  <cwd>/.toolport/settings.json
    system     $TOOLPORT_SYSTEM_SETTINGS_PATH or /etc/toolport/settings.json

Nested objects are merged key by key; any other value from a higher
precedence scope replaces the lower one. "$VAR" and "${VAR}" inside string
values are replaced from the environment.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SETTINGS_DIRECTORY_NAME = ".toolport"
SETTINGS_FILE_NAME = "settings.json"
SYSTEM_SETTINGS_ENV = "TOOLPORT_SYSTEM_SETTINGS_PATH"
DEFAULT_SYSTEM_SETTINGS_PATH = Path("/etc/toolport") / SETTINGS_FILE_NAME

_ENV_VAR_PATTERN = re.compile(r"\$(?:\{(\w+)\}|(\w+))")


class SettingScope(str, Enum):
    USER = "user"
    WORKSPACE = "workspace"
    SYSTEM = "system"


class SettingsError(RuntimeError):
    """Raised when a settings file exists but cannot be used."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"Error in {path}: {message}")


@dataclass
class SettingsFile:
    path: Path
    settings: dict[str, Any] = field(default_factory=dict)


@dataclass
class LoadedSettings:
    system: SettingsFile
    user: SettingsFile
    workspace: SettingsFile
    merged: dict[str, Any] = field(init=False)

    def __post_init__(self):
        self.merged = self.compute_merged()

    def for_scope(self, scope: SettingScope) -> SettingsFile:
        return getattr(self, scope.value)

    def compute_merged(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for scope_file in (self.user, self.workspace, self.system):
            merged = merge_settings(merged, scope_file.settings)
        return merged


def merge_settings(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with override merged over base (dicts merged recursively)."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_settings(result[key], value)
        else:
            result[key] = value
    return result


def resolve_env_vars(value: Any) -> Any:
    """Replace $VAR / ${VAR} in every string inside value. Unknown vars are kept."""
    if isinstance(value, str):
        def _sub(match: re.Match) -> str:
            name = match.group(1) or match.group(2)
            return os.environ.get(name, match.group(0))
        return _ENV_VAR_PATTERN.sub(_sub, value)
    if isinstance(value, dict):
        return {k: resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_env_vars(v) for v in value]
    return value


def _read_settings_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SettingsError(path, f"invalid JSON: {e}") from e
    except OSError as e:
        raise SettingsError(path, str(e)) from e

    if not isinstance(raw, dict):
        raise SettingsError(path, "settings must be a JSON object")

    logger.debug(f"Loaded settings from {path}")
    return resolve_env_vars(raw)


def system_settings_path() -> Path:
    return Path(os.environ.get(SYSTEM_SETTINGS_ENV, DEFAULT_SYSTEM_SETTINGS_PATH))


def load_settings(workspace_dir: str | Path, home_dir: str | Path | None = None) -> LoadedSettings:
    """
    Load and merge settings for a workspace.

    Args:
        workspace_dir: Directory the CLI runs in
        home_dir: Override for the user's home directory (defaults to Path.home())

    Raises:
        SettingsError: if an existing settings file is unreadable or malformed.
    """
    workspace_dir = Path(workspace_dir).resolve()
    home_dir = Path(home_dir).resolve() if home_dir is not None else Path.home().resolve()

    user_path = home_dir / SETTINGS_DIRECTORY_NAME / SETTINGS_FILE_NAME
    workspace_path = workspace_dir / SETTINGS_DIRECTORY_NAME / SETTINGS_FILE_NAME
    system_path = system_settings_path()

    user = SettingsFile(user_path, _read_settings_file(user_path))
    system = SettingsFile(system_path, _read_settings_file(system_path))

    # In the home directory the workspace file is the user file; don't apply it twice.
    if workspace_dir == home_dir:
        workspace = SettingsFile(workspace_path)
    else:
        workspace = SettingsFile(workspace_path, _read_settings_file(workspace_path))

    return LoadedSettings(system=system, user=user, workspace=workspace)
