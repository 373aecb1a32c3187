"""
Scope extraction for conventional commit headers.

The scope of a path is its second segment (``src/api/x.py`` -> ``api``).
Paths with a single segment scope to :data:`ROOT_KEY`, and paths below
the reserved top-level directory scope to that directory itself.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from comet_cli.grouping.file_groups import ROOT_KEY


DEFAULT_SCOPE_ROOT = "changeset"


def extract_scope(paths: Iterable[str], scope_root: str = DEFAULT_SCOPE_ROOT) -> Tuple[str, ...]:
    """Return the distinct scopes of ``paths`` in first-discovered order."""
    scopes = {}
    for path in paths:
        root, scope, *_ = path.split("/") + [""]
        if root == scope_root:
            scopes.setdefault(scope_root)
        elif scope:
            scopes.setdefault(scope)
        else:
            scopes.setdefault(ROOT_KEY)
    return tuple(scopes)


def format_scope(scopes: Iterable[str]) -> str:
    """Join scopes for display inside ``type (scope): ``."""
    return ", ".join(scopes)
