"""
Configuration loader for comet_cli.

The tool reads an optional JSON configuration file named ``config.json``
located in the ``~/.comet/`` directory in the user's home directory.
Every key has a built-in default, so a missing file simply yields the
defaults. A file that exists but cannot be parsed, or that holds a key of
the wrong type, raises :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class ConfigError(Exception):
    """Raised when the configuration file is malformed or invalid."""

    pass


DEFAULT_CONFIG: Dict[str, Any] = {
    "base_url": "http://localhost",
    "port": 11434,
    "model": "llama3",
    "request_timeout": 60,
    "max_tokens": None,
    "scope_root": "changeset",
    "remote": "origin",
}

# key -> accepted types; max_tokens may also be null
_KEY_TYPES: Dict[str, tuple] = {
    "base_url": (str,),
    "port": (int,),
    "model": (str,),
    "request_timeout": (int, float),
    "max_tokens": (int, type(None)),
    "scope_root": (str,),
    "remote": (str,),
}

_TYPE_NAMES = {
    "base_url": "a string",
    "port": "an integer",
    "model": "a string",
    "request_timeout": "a number",
    "max_tokens": "an integer",
    "scope_root": "a string",
    "remote": "a string",
}


def _get_config_directory() -> Path:
    """Return the directory holding the comet configuration (``~/.comet/``)."""
    return Path.home() / ".comet"


def load_config() -> Dict[str, Any]:
    """Load the user configuration merged over :data:`DEFAULT_CONFIG`.

    Returns:
        A dictionary containing:
        - base_url (str): The base URL of the Ollama server
        - port (int): The port number
        - model (str): The model name
        - request_timeout (int|float): Request timeout in seconds
        - max_tokens (int|None): Maximum tokens for generation
        - scope_root (str): Top-level directory that is its own scope
        - remote (str): Remote used when pushing with upstream tracking

    Raises:
        ConfigError: If the configuration file is malformed or invalid.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = _get_config_directory() / "config.json"

    if not config_path.exists():
        logger.debug("No configuration file at %s; using defaults", config_path)
        return config

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    for key, types in _KEY_TYPES.items():
        if key not in data:
            continue
        value = data[key]
        # bool is an int subclass; reject it for numeric keys
        if isinstance(value, bool) or not isinstance(value, types):
            raise ConfigError(f"'{key}' must be {_TYPE_NAMES[key]}")
        config[key] = value

    if not config["scope_root"]:
        raise ConfigError("'scope_root' must not be empty")

    logger.debug("Loaded configuration from: %s", config_path)
    logger.debug("Configuration data: %s", config)
    return config
