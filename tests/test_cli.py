"""Tests for the CLI commands and the hidden hook entry points."""

import json
from unittest.mock import patch

from typer.testing import CliRunner

from branchguard import __version__
from branchguard.cli import app
from branchguard.installer import HOOK_MARKER

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "branchguard" in result.output

    def test_version_reports_package_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"v{__version__}" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "install" in result.output

    def test_debug_flag_alone_shows_help(self):
        result = runner.invoke(app, ["--debug"])
        assert result.exit_code == 0
        assert "install" in result.output


class TestInstallCommand:
    def test_install(self, git_repo):
        result = runner.invoke(app, ["install", str(git_repo)])
        assert result.exit_code == 0, result.output
        assert "Hooks Installed" in result.output
        assert "Active policy" in result.output
        assert HOOK_MARKER in (git_repo / ".githooks" / "pre-push").read_text()

    def test_install_outside_repository(self, tmp_path):
        plain = tmp_path / "plain"
        plain.mkdir()
        result = runner.invoke(app, ["install", str(plain)])
        assert result.exit_code == 4
        assert "Not a git repository" in result.output

    def test_unexpected_error(self, git_repo):
        with patch("branchguard.cli.installer.install_hooks", side_effect=RuntimeError("disk on fire")):
            result = runner.invoke(app, ["install", str(git_repo)])
        assert result.exit_code == 5
        assert "disk on fire" in result.output


class TestUninstallCommand:
    def test_nothing_to_remove(self, git_repo):
        result = runner.invoke(app, ["uninstall", str(git_repo)])
        assert result.exit_code == 0
        assert "Nothing To Remove" in result.output

    def test_after_install(self, git_repo):
        runner.invoke(app, ["install", str(git_repo)])
        result = runner.invoke(app, ["uninstall", str(git_repo)])
        assert result.exit_code == 0
        assert "Hooks Removed" in result.output
        assert not (git_repo / ".githooks" / "pre-push").exists()


class TestDoctorCommand:
    def test_fails_before_install(self, git_repo):
        result = runner.invoke(app, ["doctor", str(git_repo)])
        assert result.exit_code == 3

    def test_passes_after_install(self, git_repo):
        runner.invoke(app, ["install", str(git_repo)])
        result = runner.invoke(app, ["doctor", str(git_repo)])
        assert result.exit_code == 0, result.output


class TestConfigCommand:
    def test_help_panel(self, git_repo):
        result = runner.invoke(app, ["config", str(git_repo)])
        assert result.exit_code == 0
        assert "Configuration Help" in result.output

    def test_show(self, git_repo):
        result = runner.invoke(app, ["config", str(git_repo), "--show"])
        assert result.exit_code == 0
        assert '"protected_branches"' in result.output

    def test_show_repo_override(self, git_repo):
        (git_repo / ".githooks").mkdir()
        (git_repo / ".githooks" / "config.json").write_text(json.dumps({"remote": "fork"}))
        result = runner.invoke(app, ["config", str(git_repo), "--show"])
        assert '"fork"' in result.output

    def test_show_invalid(self, git_repo, temp_config_dir):
        (temp_config_dir / "config.json").write_text(json.dumps({"reflog_depth": "three"}))
        result = runner.invoke(app, ["config", str(git_repo), "--show"])
        assert result.exit_code == 3
        assert "Invalid configuration value" in result.output

    def test_paths(self, git_repo, temp_config_dir):
        result = runner.invoke(app, ["config", str(git_repo), "--path"])
        assert result.exit_code == 0
        assert f"user: {temp_config_dir / 'config.json'}" in result.output
        assert "repository: " in result.output
        assert result.output.rstrip().endswith("config.json")

    def test_edit_uses_editor(self, temp_config_dir, monkeypatch):
        monkeypatch.setenv("EDITOR", "true")
        with patch("branchguard.cli.git.get_toplevel", return_value=None), patch(
            "branchguard.config.subprocess.run"
        ) as run:
            result = runner.invoke(app, ["config", "--edit"])
        assert result.exit_code == 0
        run.assert_called_once_with(["true", str(temp_config_dir / "config.json")])
        assert (temp_config_dir / "config.json").exists()


class TestHookCommands:
    def test_pre_commit_warns_on_main(self, git_repo, monkeypatch):
        monkeypatch.chdir(git_repo)
        result = runner.invoke(app, ["hook", "pre-commit"])
        assert result.exit_code == 0
        assert "Committing on main" in result.output

    def test_pre_merge_commit_without_merge(self, git_repo, monkeypatch):
        monkeypatch.chdir(git_repo)
        result = runner.invoke(app, ["hook", "pre-merge-commit"])
        assert result.exit_code == 0

    def test_pre_push_refuses_direct_commit(self, git_repo, monkeypatch):
        monkeypatch.chdir(git_repo)
        result = runner.invoke(app, ["hook", "pre-push", "origin", "git@example.com:repo.git"])
        assert result.exit_code == 1
        assert "Direct Push Refused" in result.output

    def test_pre_push_allows_feature_branch(self, git_repo, monkeypatch, git):
        git(git_repo, "branch", "feature/x")
        git(git_repo, "symbolic-ref", "HEAD", "refs/heads/feature/x")
        monkeypatch.chdir(git_repo)
        result = runner.invoke(app, ["hook", "pre-push", "origin", "url"])
        assert result.exit_code == 0
        assert "Pushing feature/x" in result.output

    def test_post_checkout_restores_hooks_path(self, git_repo, monkeypatch, git):
        runner.invoke(app, ["install", str(git_repo)])
        git(git_repo, "config", "--unset", "core.hooksPath")
        monkeypatch.chdir(git_repo)

        result = runner.invoke(app, ["hook", "post-checkout", "0000000", "1111111", "1"])
        assert result.exit_code == 0
        assert git(git_repo, "config", "core.hooksPath").endswith(".githooks")

    def test_post_merge_never_fails(self, tmp_path, monkeypatch):
        plain = tmp_path / "plain"
        plain.mkdir()
        monkeypatch.chdir(plain)
        result = runner.invoke(app, ["hook", "post-merge", "0"])
        assert result.exit_code == 0

    def test_pre_commit_with_invalid_repo_config(self, git_repo, monkeypatch):
        (git_repo / ".githooks").mkdir()
        (git_repo / ".githooks" / "config.json").write_text(json.dumps({"reflog_depth": "three"}))
        monkeypatch.chdir(git_repo)
        result = runner.invoke(app, ["hook", "pre-commit"])
        assert result.exit_code == 0
        assert "Committing on main" in result.output

    def test_pre_push_with_invalid_repo_config_still_refuses(self, git_repo, monkeypatch):
        (git_repo / ".githooks").mkdir()
        (git_repo / ".githooks" / "config.json").write_text(json.dumps({"reflog_depth": "three"}))
        monkeypatch.chdir(git_repo)
        result = runner.invoke(app, ["hook", "pre-push", "origin", "url"])
        assert result.exit_code == 1
        assert "Direct Push Refused" in result.output

    def test_pre_commit_with_undecodable_repo_config(self, git_repo, monkeypatch):
        (git_repo / ".githooks").mkdir()
        (git_repo / ".githooks" / "config.json").write_bytes(b'{"remote": "\xff"}')
        monkeypatch.chdir(git_repo)
        result = runner.invoke(app, ["hook", "pre-commit"])
        assert result.exit_code == 0
