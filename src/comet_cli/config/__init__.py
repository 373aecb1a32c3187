"""
Configuration loading for comet_cli.

Provides a simple loader for the user-level configuration file. See
:mod:`comet_cli.config.loader` for implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
