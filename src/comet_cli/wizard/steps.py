"""
Steps of the commit wizard.

The wizard stages the files the user picks, asks for a conventional
commit type, writes the message (by hand or with the LLM), commits and
optionally pushes. Repository side effects happen only inside the step
that owns them: ``stage`` adds, ``commit`` commits and ``push`` pushes.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from comet_cli.grouping.file_groups import FileOption
from comet_cli.grouping.scope import DEFAULT_SCOPE_ROOT, extract_scope, format_scope
from comet_cli.llm.commit_message_generator import CommitMessageGenerator, Decision, ask_decision
from comet_cli.ui.prompts import Option, Prompter, Spinner
from comet_cli.vcs.git_client import GitClient
from comet_cli.wizard.engine import CANCELLED, Results, Step


COMMIT_TYPES = [
    Option("feat", "feat", "A new feature"),
    Option("fix", "fix", "A bug fix"),
    Option("docs", "docs", "Documentation only changes"),
    Option("style", "style", "Changes that do not affect the meaning of the code"),
    Option("perf", "perf", "A code change that improves performance"),
    Option("refactor", "refactor", "A code change that neither fixes a bug nor adds a feature"),
    Option("test", "test", "Adding missing tests or correcting existing tests"),
    Option("chore", "chore", "Changes to the build process or auxiliary tools and libraries"),
    Option("revert", "revert", "Reverts a previous commit"),
    Option("ci", "ci", "Changes to our CI configuration files and scripts"),
]
DEFAULT_COMMIT_TYPE = "feat"


@dataclass(frozen=True)
class StageResult:
    """Result of the ``stage`` step."""

    staged: Tuple[str, ...]
    scope: Tuple[str, ...]


def commit_prefix(commit_type: str, scope: Sequence[str]) -> str:
    """Build the message header, e.g. ``"fix (api, cli): "``."""
    return f"{commit_type} ({format_scope(scope)}): "


@contextmanager
def _spinning(spinner: Spinner, message: str, done: str) -> Iterator[None]:
    spinner.start(message)
    try:
        yield
    except Exception:
        spinner.stop(f"{message} failed", ok=False)
        raise
    spinner.stop(done)


def build_commit_steps(
    git: GitClient,
    prompter: Prompter,
    groups: Mapping[str, Sequence[FileOption]],
    generator: Optional[CommitMessageGenerator] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[Step]:
    """Return the commit wizard steps.

    Parameters
    ----------
    git : GitClient
        Repository the steps act on.
    prompter : Prompter
        Source of every user answer.
    groups : Mapping[str, Sequence[FileOption]]
        Changed files grouped for the staging prompt.
    generator : CommitMessageGenerator, optional
        When given, an ``ai`` step asks whether to draft the message
        with the LLM. Without it the message is always typed by hand.
    config : dict, optional
        Loaded configuration; ``scope_root`` and ``remote`` are used.
    """
    config = config or {}
    scope_root = config.get("scope_root", DEFAULT_SCOPE_ROOT)
    remote = config.get("remote", "origin")

    def stage(results: Results) -> StageResult:
        selected = prompter.group_multiselect("Select files to stage", groups, required=True)
        git.stage(selected)
        return StageResult(staged=tuple(selected), scope=extract_scope(selected, scope_root))

    def commit_type(results: Results) -> str:
        return prompter.select(
            "Please enter a type for the commit:", COMMIT_TYPES, default=DEFAULT_COMMIT_TYPE
        )

    def use_ai(results: Results) -> bool:
        return prompter.confirm("Do you want to generate the commit message with AI?", default=False)

    def write_message(prefix: str) -> Any:
        message = prefix + prompter.text("Please enter a commit message")
        while True:
            decision = ask_decision(prompter)
            if decision is Decision.COMMIT:
                return message
            if decision is Decision.CANCEL:
                return CANCELLED
            if decision is Decision.EDIT:
                return prompter.text("Edit the commit message", initial_value=message)
            message = prefix + prompter.text("Please enter a commit message")

    def commit_msg(results: Results) -> Any:
        prefix = commit_prefix(results["type"], results["stage"].scope)
        if generator is not None and results.get("ai"):
            diff = git.staged_diff()
            message = generator.generate(prefix, diff)
            return CANCELLED if message is None else message
        return write_message(prefix)

    def commit(results: Results) -> bool:
        message = results["commitMsg"]
        if not prompter.confirm(f'Commit with message "{message}"?', default=True):
            return False
        with _spinning(prompter.spinner(), "Committing", "Committed"):
            git.commit(message)
        return True

    def push(results: Results) -> bool:
        if not prompter.confirm("Push?", default=True):
            return False
        with _spinning(prompter.spinner(), "Pushing", "Pushed"):
            branch = git.get_current_branch()
            git.push_with_upstream(branch, remote)
            git.push()
        return True

    steps = [
        Step("stage", stage),
        Step("type", commit_type),
    ]
    if generator is not None:
        steps.append(Step("ai", use_ai))
    steps += [
        Step("commitMsg", commit_msg),
        Step("commit", commit),
        Step("push", push, when=lambda results: results.get("commit") is True),
    ]
    return steps
