"""Enforce dependency direction rules at package boundaries.

Dependency Direction Rules:
    CLI (cli*.py) -> hooks/ -> detection/naming -> ports/

    - hooks/ and the domain modules must NOT import the CLI surface
      (cli.py, cli_*.py)
    - hooks/, detection and naming talk to git through ports/ only and
      must NOT import adapters/

This test file uses grep-based boundary tests (not just cycle detection) to catch
bad-direction imports that don't form a cycle.
"""

import subprocess
from pathlib import Path

import pytest

# Use absolute paths relative to this test file
REPO_ROOT = Path(__file__).parent.parent
SRC = REPO_ROOT / "src" / "branchguard"

CLI_IMPORT = r"(from branchguard\.cli|from \.+cli|import branchguard\.cli)"
ADAPTER_IMPORT = r"(from branchguard\.adapters|from \.+adapters|import branchguard\.adapters)"


def _grep(pattern: str, target: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["grep", "-rE", pattern, str(target)],
        capture_output=True,
        text=True,
    )


class TestDomainDoesNotImportCLI:
    """Domain modules must not depend on CLI surface modules."""

    @pytest.mark.parametrize(
        "target",
        [
            "hooks",
            "detection.py",
            "naming.py",
            "installer.py",
            "doctor.py",
            "config.py",
            "git.py",
            "platform.py",
        ],
    )
    def test_does_not_import_cli_modules(self, target: str) -> None:
        result = _grep(CLI_IMPORT, SRC / target)
        # grep returns 1 when no matches found (which is what we want)
        assert result.returncode == 1, f"{target} imports cli modules:\n{result.stdout}"


class TestHeuristicsUsePorts:
    """Merge heuristics see git only through the GitClient port."""

    @pytest.mark.parametrize("target", ["hooks", "detection.py", "naming.py"])
    def test_does_not_import_adapters(self, target: str) -> None:
        result = _grep(ADAPTER_IMPORT, SRC / target)
        assert result.returncode == 1, f"{target} imports adapters:\n{result.stdout}"

    def test_ports_import_nothing_concrete(self) -> None:
        """ports/ must not depend on adapters or git."""
        result = _grep(r"(adapters|from \.\.git |from \.\. import git)", SRC / "ports")
        assert result.returncode == 1, f"ports/ imports concrete code:\n{result.stdout}"
