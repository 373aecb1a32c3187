"""
Command line interface for the comet_cli tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``comet`` command. It loads the configuration,
checks that the working directory is a Git repository, lists the changed
files and runs the commit wizard, which stages, commits and pushes as
the user confirms each step.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click

from comet_cli import __version__
from comet_cli.config.loader import ConfigError, load_config
from comet_cli.grouping.file_groups import group_files
from comet_cli.llm.commit_message_generator import CommitMessageGenerator
from comet_cli.llm.ollama_client import LLMError, OllamaClient
from comet_cli.ui.prompts import Prompter
from comet_cli.vcs.git_client import GitClient, GitError
from comet_cli.wizard.engine import Wizard
from comet_cli.wizard.steps import build_commit_steps

# Create a module-level logger. Attach a null handler and disable
# propagation until the CLI configures logging.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_LLM_FAILURE = 7


def enable_package_logging() -> None:
    """Let every ``comet_cli`` logger reach the root handlers.

    Module loggers start with propagation disabled so that importing the
    package never writes to an unconfigured root logger.
    """
    package = __name__.split(".")[0]
    for name, candidate in logging.Logger.manager.loggerDict.items():
        if isinstance(candidate, logging.Logger) and (name == package or name.startswith(package + ".")):
            candidate.propagate = True


def run_session(
    git: GitClient,
    prompter: Prompter,
    config: Dict[str, Any],
    generator: Optional[CommitMessageGenerator] = None,
) -> int:
    """Run one commit session and return the exit code.

    Parameters
    ----------
    git : GitClient
        Repository of the current working directory.
    prompter : Prompter
        Terminal used for every question and status line.
    config : dict
        Loaded configuration.
    generator : CommitMessageGenerator, optional
        Enables the AI-assisted message step.

    Raises
    ------
    GitError
        If a repository operation fails. Paths staged before the failure
        stay staged.
    LLMError
        If generating a commit message fails.
    """
    if not git.is_inside_work_tree():
        prompter.error("Not a git repository.")
        return EXIT_NO_REPO

    groups = group_files(git.list_changed_paths())
    if not groups:
        prompter.outro("No files to stage.")
        return EXIT_SUCCESS
    logger.debug("Changed files in %d group(s)", len(groups))

    wizard = Wizard(
        build_commit_steps(git, prompter, groups, generator=generator, config=config),
        abort_on=(click.Abort,),
    )
    try:
        outcome = wizard.run()
    except (GitError, LLMError):
        prompter.warning("Files staged so far remain staged; run 'git restore --staged .' to undo.")
        raise

    if outcome.cancelled:
        git.unstage_all()
        prompter.outro("Commit aborted.")
        return EXIT_SUCCESS

    if not outcome.results.get("commit"):
        prompter.outro("Nothing committed; files remain staged.")
        return EXIT_SUCCESS

    prompter.outro("You're all set!")
    return EXIT_SUCCESS


@click.command()
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="comet")
def main(verbose: bool) -> None:
    """☄️  Interactive assistant to stage, commit and push your changes.

    Pick the files to stage, choose a conventional commit type and write
    the message yourself or let a local LLM draft it from the diff.
    """
    # force=True so handlers are reconfigured on repeated invocations in tests
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    enable_package_logging()

    ctx = click.get_current_context(silent=True)
    prompter = Prompter()
    prompter.intro("Comet CLI")

    try:
        try:
            config = load_config()
        except ConfigError as exc:
            prompter.error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        git = GitClient(Path.cwd())
        ollama_client = OllamaClient(
            base_url=config["base_url"],
            port=config["port"],
            model=config["model"],
            request_timeout=float(config["request_timeout"]),
            max_tokens=config.get("max_tokens"),
        )
        generator = CommitMessageGenerator(ollama_client, prompter)

        try:
            code = run_session(git, prompter, config, generator)
        except GitError as exc:
            prompter.error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        except LLMError as exc:
            prompter.error(f"LLM error: {exc}")
            prompter.info("Make sure Ollama is running and accessible")
            raise click.exceptions.Exit(EXIT_LLM_FAILURE)

        raise click.exceptions.Exit(code)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        prompter.error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
