"""Git operations wrapper using subprocess."""

from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import AcommitError


class GitError(AcommitError):
    """Error during git operations."""

    pass


class GitRepo:
    """Wrapper for the handful of git commands acommit needs."""

    def __init__(self, path: str | Path | None = None) -> None:
        """Initialize git repository wrapper.

        Args:
            path: Path to the repository (defaults to current directory)
        """
        self.path = Path(path) if path else Path.cwd()

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a git command.

        Args:
            *args: Git command arguments

        Returns:
            CompletedProcess result

        Raises:
            GitError: If git is missing or the command exits non-zero
        """
        cmd = ["git", *args]
        try:
            return subprocess.run(
                cmd,
                cwd=self.path,
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise GitError("git not found. Is git installed and on PATH?") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise GitError(
                f"Command failed: {' '.join(cmd)}\nExit code: {e.returncode}\nStderr: {stderr}"
            ) from e

    def check_repository(self) -> None:
        """Check if this is a valid git repository.

        Raises:
            GitError: If not a git repository
        """
        try:
            self._run("rev-parse", "--git-dir")
        except GitError as e:
            raise GitError("Not a git repository or git not found") from e

    def get_status_lines(self) -> list[str]:
        """Get the porcelain status lines of the working tree."""
        result = self._run("status", "--porcelain")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def get_name_status_diff(self) -> str:
        """Get the name-status diff of staged changes.

        Falls back to unstaged changes when nothing is staged.
        """
        result = self._run("diff", "--cached", "--name-status")
        if result.stdout.strip():
            return result.stdout

        result = self._run("diff", "--name-status")
        return result.stdout

    def stage_all(self) -> None:
        """Stage every change, including untracked and deleted files."""
        try:
            self._run("add", "-A")
        except GitError as e:
            raise GitError(f"Failed to add changes\n{e}") from e

    def commit(self, message: str) -> None:
        """Create a commit with the given message."""
        try:
            self._run("commit", "-m", message)
        except GitError as e:
            raise GitError(f"Failed to create commit\n{e}") from e
