"""
Version control system (VCS) integration.

This package contains the Git client used by the commit wizard. The
client exposes methods for checking the working tree, listing local
changes, staging and unstaging paths, committing, and pushing.
"""

from .git_client import GitClient, GitError  # noqa: F401
