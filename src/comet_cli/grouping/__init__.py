"""
Grouping logic for the staging prompt and commit scope.

See :mod:`comet_cli.grouping.file_groups` and
:mod:`comet_cli.grouping.scope` for details.
"""

from .file_groups import ROOT_KEY, FileOption, group_files  # noqa: F401
from .scope import extract_scope, format_scope  # noqa: F401
