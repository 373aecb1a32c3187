#!/usr/bin/env python
"""
Thin wrapper script to invoke the comet_cli CLI.

Running ``python comet.py`` is equivalent to running the ``comet``
console script installed via ``pyproject.toml``.
"""

from comet_cli.cli import main


if __name__ == "__main__":
    main(prog_name="comet")
