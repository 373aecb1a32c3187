"""
Terminal interaction for comet_cli.

See :mod:`comet_cli.ui.prompts` for the prompt and spinner helpers.
"""

from .prompts import Option, Prompter, Spinner, parse_selection  # noqa: F401
