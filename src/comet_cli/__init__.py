"""
Top-level package for comet_cli.

This package exposes the main CLI entry point via the
``comet_cli.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
