"""
Error types for branchguard.

Every error carries a message for the user, an optional suggested action
and optional debug context (shown with --debug). The exit code is derived
from the error type via exit_codes.EXIT_CODE_MAP.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .exit_codes import get_exit_code_for_exception


@dataclass(eq=False)
class BranchGuardError(Exception):
    """Base class for all errors rendered by the CLI error boundary."""

    title: ClassVar[str] = "Error"
    user_message: str = "An error occurred"
    suggested_action: str = ""
    debug_context: str | None = None
    exit_code: int = field(init=False, default=1)

    def __post_init__(self) -> None:
        self.exit_code = get_exit_code_for_exception(self)

    def __str__(self) -> str:
        return self.user_message


@dataclass(eq=False)
class GitNotFoundError(BranchGuardError):
    """Git is not installed or not in PATH."""

    title: ClassVar[str] = "Git Not Found"
    user_message: str = "Git is not installed or not in PATH"
    suggested_action: str = "Install Git from https://git-scm.com/downloads"


@dataclass(eq=False)
class NotAGitRepoError(BranchGuardError):
    """The target path is not inside a git repository."""

    title: ClassVar[str] = "Not A Git Repository"
    path: str = ""
    user_message: str = ""
    suggested_action: str = "Run this command from inside a git repository"

    def __post_init__(self) -> None:
        if not self.user_message:
            self.user_message = f"Not a git repository: {self.path}"
        super().__post_init__()


@dataclass(eq=False)
class HooksInstallError(BranchGuardError):
    """Writing hooks or configuring core.hooksPath failed."""

    title: ClassVar[str] = "Hook Installation Failed"
    target: str = ""
    user_message: str = ""
    suggested_action: str = "Check file permissions on the repository and retry"

    def __post_init__(self) -> None:
        if not self.user_message:
            self.user_message = f"Could not install hooks into {self.target}"
        super().__post_init__()


@dataclass(eq=False)
class ConfigError(BranchGuardError):
    """Configuration is invalid."""

    title: ClassVar[str] = "Invalid Configuration"
    file_path: str = ""
    user_message: str = ""
    suggested_action: str = "Fix or remove the configuration file"

    def __post_init__(self) -> None:
        if not self.user_message:
            self.user_message = f"Invalid configuration: {self.file_path}"
        super().__post_init__()
