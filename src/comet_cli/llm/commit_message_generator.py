"""
AI-assisted commit message drafting.

This module provides the :class:`CommitMessageGenerator` class, which
streams a one-line commit message for a staged diff from the language
model (via :class:`OllamaClient`) and lets the user review the draft.
The review offers the same four decisions as manual entry: commit,
cancel, edit or regenerate. Regeneration starts over from the header
prefix and reuses the diff; it can be repeated any number of times.
"""

from __future__ import annotations

import enum
import logging
from textwrap import dedent
from typing import Optional

from comet_cli.llm.ollama_client import LLMError, OllamaClient
from comet_cli.ui.prompts import Option, Prompter


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


SYSTEM_PROMPT = dedent(
    """
    You are an expert software engineer writing git commit messages.
    You will receive the output of `git diff --staged`.

    Reply with exactly one line: a commit message summarizing the diff.
    - Use the imperative mood ("add", "fix", "remove").
    - Be concise, at most 50 words.
    - Do NOT add a type or scope prefix such as "feat:" or "fix(api):".
    - Do NOT wrap the message in quotes or backticks.
    - Do NOT add any explanation before or after the message.
    """
).strip()


class Decision(str, enum.Enum):
    """What to do with a proposed commit message."""

    COMMIT = "commit"
    CANCEL = "cancel"
    EDIT = "edit"
    REGENERATE = "regenerate"


DECISION_OPTIONS = [
    Option(Decision.COMMIT.value, "Commit"),
    Option(Decision.CANCEL.value, "Cancel"),
    Option(Decision.EDIT.value, "Edit"),
    Option(Decision.REGENERATE.value, "Regenerate"),
]


def ask_decision(prompter: Prompter) -> Decision:
    """Ask the user what to do with the current commit message."""
    answer = prompter.select("What do you want to do?", DECISION_OPTIONS, default=Decision.COMMIT.value)
    return Decision(answer)


class CommitMessageGenerator:
    """Draft commit messages with the LLM and loop until the user decides."""

    def __init__(self, ollama_client: OllamaClient, prompter: Prompter) -> None:
        self.ollama_client = ollama_client
        self.prompter = prompter

    def draft(self, prefix: str, diff: str) -> str:
        """Stream one attempt and return ``prefix`` followed by the model's line.

        Raises
        ------
        LLMError
            If the completion stream fails; the attempt is abandoned.
        """
        spinner = self.prompter.spinner()
        spinner.start("Generating commit message")
        generated = ""
        try:
            for fragment in self.ollama_client.stream_chat(SYSTEM_PROMPT, diff):
                generated += fragment
                spinner.message(prefix + generated.lstrip())
        except LLMError:
            spinner.stop("Commit message generation failed", ok=False)
            raise
        spinner.stop("Commit message generated")
        logger.debug("Generated %d characters of commit message", len(generated))
        return prefix + generated.strip()

    def generate(self, prefix: str, diff: str) -> Optional[str]:
        """Run the draft-review loop.

        Parameters
        ----------
        prefix : str
            The conventional commit header, e.g. ``"feat (api): "``.
        diff : str
            The staged diff, fetched once by the caller.

        Returns
        -------
        Optional[str]
            The accepted or edited message, or ``None`` if the user
            cancelled.
        """
        attempt = 0
        while True:
            attempt += 1
            logger.debug("Commit message attempt %d", attempt)
            message = self.draft(prefix, diff)
            self.prompter.note("Proposed commit message", message)

            decision = ask_decision(self.prompter)
            if decision is Decision.COMMIT:
                return message
            if decision is Decision.CANCEL:
                return None
            if decision is Decision.EDIT:
                return self.prompter.text("Edit the commit message", initial_value=message)
            # Decision.REGENERATE: next attempt starts from the bare prefix
