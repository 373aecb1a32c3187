"""
Step-by-step wizard used to assemble a commit.

:mod:`comet_cli.wizard.engine` runs an ordered list of named steps and
:mod:`comet_cli.wizard.steps` defines the steps of the commit wizard.
"""

from .engine import CANCELLED, Step, Wizard, WizardResult  # noqa: F401
from .steps import COMMIT_TYPES, build_commit_steps  # noqa: F401
