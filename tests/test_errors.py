"""Tests for error types and their exit codes."""

import pytest

from branchguard.errors import (
    BranchGuardError,
    ConfigError,
    GitNotFoundError,
    HooksInstallError,
    NotAGitRepoError,
)
from branchguard.exit_codes import EXIT_BLOCKED, get_exit_code_for_exception
from branchguard.ui import render_error


@pytest.mark.parametrize(
    "error, code",
    [
        (BranchGuardError(), 4),
        (NotAGitRepoError(path="/tmp/x"), 4),
        (HooksInstallError(target="/tmp/x"), 4),
        (ConfigError(file_path="cfg.json"), 3),
        (GitNotFoundError(), 5),
    ],
)
def test_exit_codes(error, code):
    assert error.exit_code == code


def test_unmapped_exception_is_blocked():
    assert get_exit_code_for_exception(ValueError("x")) == EXIT_BLOCKED


def test_default_messages():
    assert str(NotAGitRepoError(path="/tmp/x")) == "Not a git repository: /tmp/x"
    assert str(HooksInstallError(target="/r/.githooks")) == "Could not install hooks into /r/.githooks"
    assert str(ConfigError(user_message="bad value")) == "bad value"


def test_errors_are_raisable_and_hashable():
    with pytest.raises(BranchGuardError):
        raise GitNotFoundError()
    assert len({GitNotFoundError(), GitNotFoundError()}) == 2


def test_render_error_debug_context(console):
    error = ConfigError(user_message="Invalid configuration value", debug_context="{'reflog_depth': 'x'}")
    render_error(console, error, debug=True)
    output = console.export_text()
    assert "Invalid Configuration" in output
    assert "Invalid configuration value" in output
    assert "reflog_depth" in output


def test_render_error_hides_debug_context(console):
    error = ConfigError(user_message="Invalid configuration value", debug_context="secret-detail")
    render_error(console, error)
    assert "secret-detail" not in console.export_text()


@pytest.mark.parametrize(
    "error, title",
    [
        (BranchGuardError(), "Error"),
        (GitNotFoundError(), "Git Not Found"),
        (NotAGitRepoError(path="/tmp/x"), "Not A Git Repository"),
        (HooksInstallError(target="/tmp/x"), "Hook Installation Failed"),
    ],
)
def test_render_error_title(console, error, title):
    render_error(console, error)
    assert title in console.export_text()
    assert "NotAGitRepo Error" not in console.export_text()
