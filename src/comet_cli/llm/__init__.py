"""
Language model integration for comet_cli.

This package contains the :class:`OllamaClient` for streaming completions
from an Ollama LLM server and the :class:`CommitMessageGenerator` which
drives the draft-review loop for AI-assisted commit messages.
"""

from .ollama_client import OllamaClient, LLMError  # noqa: F401
from .commit_message_generator import CommitMessageGenerator, Decision  # noqa: F401
