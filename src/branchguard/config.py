"""
Configuration management.

Configuration is layered, later layers winning key by key:
1. DEFAULT_CONFIG
2. the user file  <config dir>/config.json
3. the repository file  <repo>/<hooks_dir>/config.json

The repository file lives in the (git-ignored) hooks directory, so it is
local to one clone.
"""

import copy
import json
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import platform as platform_module
from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

DEFAULT_CONFIG = {
    "protected_branches": ["main", "master"],
    "forbidden_merge_sources": ["dev"],
    "remote": "origin",
    "temp_branch_prefix": "feat/premerge",
    "hooks_dir": ".githooks",
    "reflog_depth": 3,
    "squash_file_threshold": 3,
    "forbidden_squash_file_threshold": 5,
    "forbidden_squash_dir_threshold": 2,
    "fix_windows_credentials": True,
}


def _as_names(value) -> tuple:
    """Accept a single name or a list of names; drop empty entries."""
    if isinstance(value, str):
        value = [value]
    return tuple(str(v) for v in value if str(v))


@dataclass(frozen=True)
class Settings:
    """Typed view of the merged configuration used by the hooks."""

    protected_branches: tuple = ("main", "master")
    forbidden_merge_sources: tuple = ("dev",)
    remote: str = "origin"
    temp_branch_prefix: str = "feat/premerge"
    hooks_dir: str = ".githooks"
    reflog_depth: int = 3
    squash_file_threshold: int = 3
    forbidden_squash_file_threshold: int = 5
    forbidden_squash_dir_threshold: int = 2
    fix_windows_credentials: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from a merged config dict, validating types."""
        try:
            return cls(
                protected_branches=_as_names(data["protected_branches"]),
                forbidden_merge_sources=_as_names(data["forbidden_merge_sources"]),
                remote=str(data["remote"]),
                temp_branch_prefix=str(data["temp_branch_prefix"]).rstrip("-/"),
                hooks_dir=str(data["hooks_dir"]),
                reflog_depth=int(data["reflog_depth"]),
                squash_file_threshold=int(data["squash_file_threshold"]),
                forbidden_squash_file_threshold=int(data["forbidden_squash_file_threshold"]),
                forbidden_squash_dir_threshold=int(data["forbidden_squash_dir_threshold"]),
                fix_windows_credentials=bool(data["fix_windows_credentials"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(
                user_message=f"Invalid configuration value: {e}",
                debug_context=json.dumps(data, indent=2, default=str),
            ) from e

    def is_protected(self, branch: Optional[str]) -> bool:
        """Check if branch is one of the protected branches."""
        return branch is not None and branch in self.protected_branches


def get_config_dir() -> Path:
    """Get the user configuration directory."""
    return platform_module.get_config_dir()


def get_config_file() -> Path:
    """Get the user configuration file path."""
    return get_config_dir() / CONFIG_FILENAME


def get_repo_config_file(repo_root: Path, hooks_dir: Optional[str] = None) -> Path:
    """Get the repository-local configuration file path."""
    return repo_root / (hooks_dir or DEFAULT_CONFIG["hooks_dir"]) / CONFIG_FILENAME


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base."""

    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value

    return base


def _read_json(file_path: Path) -> dict:
    """Read a JSON object from file_path; missing or malformed files yield {}."""
    if not file_path.exists():
        return {}
    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except (ValueError, OSError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", file_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level is not an object", file_path)
        return {}
    return data


def load_config(repo_root: Optional[Path] = None) -> dict:
    """Load configuration, merging user and repository files over the defaults."""

    config = copy.deepcopy(DEFAULT_CONFIG)
    deep_merge(config, _read_json(get_config_file()))

    if repo_root is not None:
        repo_file = get_repo_config_file(repo_root, config.get("hooks_dir"))
        deep_merge(config, _read_json(repo_file))

    return config


def load_settings(repo_root: Optional[Path] = None) -> Settings:
    """Load configuration and return the typed Settings view."""
    return Settings.from_dict(load_config(repo_root))


def save_config(config: dict, file_path: Optional[Path] = None) -> Path:
    """Save configuration to file (the user file by default)."""

    target = file_path or get_config_file()
    target.parent.mkdir(parents=True, exist_ok=True)

    with open(target, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)

    return target


def open_in_editor(file_path: Optional[Path] = None) -> Path:
    """Open a config file in $EDITOR, creating it with defaults first."""

    target = file_path or get_config_file()
    if not target.exists():
        save_config(DEFAULT_CONFIG, target)

    editor = os.environ.get("EDITOR") or ("notepad" if platform_module.is_windows() else "nano")
    subprocess.run([editor, str(target)])
    return target
