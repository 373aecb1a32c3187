"""
Git client implementation for comet_cli.

This module wraps the Git operations required by the commit wizard. It
is intentionally minimal and only implements the subset of features
needed by the CLI. All subprocess calls go through :meth:`GitClient._run`
so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Sequence


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with the Git repository at ``workdir``.

    Paths passed to and returned by the client are relative to
    ``workdir``, which is normally the directory the user invoked the CLI
    from.
    """

    def __init__(self, workdir: Path) -> None:
        self.workdir = workdir

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the working directory.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.workdir,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            logger.error("Git executable not found: %s", e)
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # Repository status
    # ------------------------------------------------------------------
    def is_inside_work_tree(self) -> bool:
        """Return True if the working directory is inside a Git work tree."""
        try:
            result = self._run(["rev-parse", "--is-inside-work-tree"], check=False)
        except GitError:
            return False
        return result.returncode == 0 and result.stdout.strip() == "true"

    def list_changed_paths(self) -> List[str]:
        """List untracked and modified paths, excluding ignored ones.

        Returns
        -------
        List[str]
            Paths in the order Git reports them, each path at most once.

        Raises
        ------
        GitError
            If the ``git ls-files`` command fails.
        """
        # -z keeps non-ASCII and odd names unquoted
        result = self._run(
            ["ls-files", "-z", ".", "--exclude-standard", "--others", "-m"], check=True
        )
        paths: List[str] = []
        seen = set()
        for path in result.stdout.split("\0"):
            # A file both modified and deleted is listed twice by ls-files
            if not path or path in seen:
                continue
            seen.add(path)
            paths.append(path)
        return paths

    def staged_diff(self) -> str:
        """Return the diff of everything currently staged."""
        result = self._run(["diff", "--staged"], check=True)
        return result.stdout

    def get_current_branch(self) -> str:
        """Get the name of the current branch.

        Raises
        ------
        GitError
            If unable to determine the current branch (e.g. detached HEAD).
        """
        result = self._run(["branch", "--show-current"], check=True)
        branch = result.stdout.strip()
        if not branch:
            raise GitError("Cannot push from a detached HEAD")
        return branch

    # ------------------------------------------------------------------
    # Staging, committing, pushing
    # ------------------------------------------------------------------
    def stage(self, paths: Sequence[str]) -> None:
        """Stage exactly the given paths."""
        if not paths:
            return
        self._run(["add", "--"] + list(paths), check=True)

    def has_commits(self) -> bool:
        """Return True if HEAD resolves, i.e. the current branch has a commit."""
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    def unstage_all(self) -> None:
        """Remove every path from the staging area, keeping working tree edits.

        Before the first commit there is no HEAD to restore from, so the
        index entries are dropped instead.
        """
        if self.has_commits():
            self._run(["restore", "--staged", "."], check=True)
        else:
            self._run(["rm", "-r", "--cached", "--quiet", "--ignore-unmatch", "--", "."], check=True)

    def commit(self, message: str) -> None:
        """Create a commit with the given message."""
        self._run(["commit", "-m", message], check=True)

    def push_with_upstream(self, branch: str, remote: str = "origin") -> None:
        """Push ``branch`` to ``remote`` and set it as the upstream."""
        self._run(["push", "-u", remote, branch], check=True)

    def push(self) -> None:
        """Push the current branch to its upstream."""
        self._run(["push"], check=True)
