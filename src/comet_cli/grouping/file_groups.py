"""
Grouping of changed paths for the staging prompt.

Changed paths are grouped by their first path segment so that the user
can pick files directory by directory. Files at the top of the tree go
into the :data:`ROOT_KEY` group.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List


ROOT_KEY = "/"


@dataclass(frozen=True)
class FileOption:
    """A selectable entry of the staging prompt.

    Attributes
    ----------
    value : str
        The full repository-relative path, used when staging.
    label : str
        The path below the group key, shown to the user.
    """

    value: str
    label: str


def group_files(paths: Iterable[str]) -> Dict[str, List[FileOption]]:
    """Group changed paths by their top-level directory.

    Parameters
    ----------
    paths : Iterable[str]
        ``/``-separated paths relative to the repository.

    Returns
    -------
    Dict[str, List[FileOption]]
        Groups in order of first occurrence. An empty input yields an
        empty mapping.
    """
    groups: Dict[str, List[FileOption]] = {}
    for path in paths:
        root, _, rest = path.partition("/")
        if not rest:
            groups.setdefault(ROOT_KEY, []).append(FileOption(value=path, label=path))
        else:
            groups.setdefault(root, []).append(FileOption(value=path, label=rest))
    return groups
