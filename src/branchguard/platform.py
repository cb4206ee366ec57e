"""
Platform detection and cross-platform utilities.

Handles detection of:
- Operating system (macOS, Linux, Windows incl. Git Bash/MSYS/Cygwin)
- Platform-appropriate configuration directory
- Windows Git Credential Manager misconfiguration

Git for Windows runs hooks through its bundled bash, so sys.platform is
still "win32" there; MSYS and Cygwin Pythons report "msys"/"cygwin".
"""

import logging
import os
import shutil
import sys
from enum import Enum
from pathlib import Path

from rich.console import Console

from . import git
from .panels import create_warning_panel

logger = logging.getLogger(__name__)

APP_NAME = "branchguard"


class Platform(Enum):
    """Supported platforms."""

    MACOS = "mac"
    LINUX = "linux"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


# ═══════════════════════════════════════════════════════════════════════════════
# Platform Detection
# ═══════════════════════════════════════════════════════════════════════════════


def detect_platform() -> Platform:
    """Detect the current platform from sys.platform."""
    if sys.platform == "darwin":
        return Platform.MACOS
    elif sys.platform in ("win32", "cygwin", "msys"):
        return Platform.WINDOWS
    elif sys.platform.startswith("linux"):
        return Platform.LINUX

    return Platform.UNKNOWN


def detect_os() -> str:
    """Return the short OS name: mac, linux, windows or unknown."""
    return detect_platform().value


def is_windows() -> bool:
    """Check if running on Windows (native, Git Bash, MSYS or Cygwin)."""
    return detect_platform() is Platform.WINDOWS


def is_macos() -> bool:
    """Check if running on macOS."""
    return detect_platform() is Platform.MACOS


# ═══════════════════════════════════════════════════════════════════════════════
# Platform-Specific Paths
# ═══════════════════════════════════════════════════════════════════════════════


def get_config_dir() -> Path:
    """
    Get the platform-appropriate configuration directory.

    - macOS: ~/Library/Application Support/branchguard
    - Linux: ~/.config/branchguard (or $XDG_CONFIG_HOME/branchguard)
    - Windows: %APPDATA%\\branchguard
    """
    if is_macos():
        return Path.home() / "Library" / "Application Support" / APP_NAME
    elif is_windows():
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / APP_NAME
        return Path.home() / "AppData" / "Roaming" / APP_NAME
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / APP_NAME
        return Path.home() / ".config" / APP_NAME


# ═══════════════════════════════════════════════════════════════════════════════
# GitHub CLI guidance
# ═══════════════════════════════════════════════════════════════════════════════

GH_QUICKSTART_URL = "https://docs.github.com/en/github-cli/github-cli/quickstart"

_GH_INSTALL_COMMANDS = {
    Platform.MACOS: "macOS: brew install gh",
    Platform.LINUX: "Linux: sudo apt install gh",
    Platform.WINDOWS: "Windows: winget install --id GitHub.cli",
}


def gh_install_hint(platform: Platform | None = None) -> str:
    """Return the install command for the GitHub CLI on this platform."""
    platform = platform or detect_platform()
    command = _GH_INSTALL_COMMANDS.get(platform)
    if command is None:
        return f"See {GH_QUICKSTART_URL}"
    return f"{command} (or see {GH_QUICKSTART_URL})"


# ═══════════════════════════════════════════════════════════════════════════════
# Windows Credential Manager
# ═══════════════════════════════════════════════════════════════════════════════

DEPRECATED_CREDENTIAL_HELPER = "manager-core"
CREDENTIAL_HELPER = "manager"


def check_windows_credentials(console: Console, platform: Platform | None = None) -> bool:
    """
    Repair the deprecated Git Credential Manager helper on Windows.

    Pushing with credential.helper=manager-core fails on current Git for
    Windows releases. Rewrites the global setting to "manager" and prints
    what happened. Returns True when the setting was changed.
    """
    platform = platform or detect_platform()
    if platform is not Platform.WINDOWS:
        return False

    changed = False
    helper = git.get_config("credential.helper", scope="global")
    if helper == DEPRECATED_CREDENTIAL_HELPER:
        logger.debug("Found deprecated credential.helper=%s", helper)
        if git.set_config("credential.helper", CREDENTIAL_HELPER, scope="global"):
            changed = True
            console.print(
                create_warning_panel(
                    "Credential Manager Fixed",
                    f"credential.helper updated from '{DEPRECATED_CREDENTIAL_HELPER}' "
                    f"to '{CREDENTIAL_HELPER}'",
                )
            )
        else:
            console.print(
                create_warning_panel(
                    "Credential Manager Misconfigured",
                    f"credential.helper is set to the deprecated '{DEPRECATED_CREDENTIAL_HELPER}'",
                    f"git config --global credential.helper {CREDENTIAL_HELPER}",
                )
            )

    if shutil.which("git-credential-manager") is None:
        console.print(
            create_warning_panel(
                "Git Credential Manager Not Found",
                "If pushing fails with a 'credential-manager-core' error:\n"
                "  1. Update to the latest Git for Windows\n"
                f"  2. Or run: git config --global credential.helper {CREDENTIAL_HELPER}\n"
                "  3. Or install the latest Git Credential Manager",
            )
        )

    return changed
