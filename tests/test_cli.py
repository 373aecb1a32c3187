import json
import logging
import subprocess
import unittest
from unittest.mock import patch

from click.testing import CliRunner

import comet_cli.cli as cli
from comet_cli.llm.ollama_client import LLMError
from comet_cli.vcs.git_client import GitError


class DummyGitClient:
    def __init__(self, changed=(), inside=True):
        self.changed = list(changed)
        self.inside = inside
        self.stage_called = []
        self.commit_called = []
        self.unstage_called = 0
        self.push_called = []

    def is_inside_work_tree(self):
        return self.inside

    def list_changed_paths(self):
        return self.changed

    def stage(self, paths):
        self.stage_called.append(list(paths))

    def unstage_all(self):
        self.unstage_called += 1

    def staged_diff(self):
        return "diff --git a/src/api/x.py b/src/api/x.py\n+fix\n"

    def commit(self, message):
        self.commit_called.append(message)

    def get_current_branch(self):
        return "main"

    def push_with_upstream(self, branch, remote="origin"):
        self.push_called.append(("upstream", remote, branch))

    def push(self):
        self.push_called.append(("push",))


class DummyOllamaClient:
    def __init__(self, fragments=(), error=None, **kwargs):
        self.fragments = list(fragments)
        self.error = error
        self.kwargs = kwargs

    def stream_chat(self, system, content):
        for fragment in self.fragments:
            yield fragment
        if self.error:
            raise self.error


def answers(*lines):
    return "\n".join(lines) + "\n"


class TestCLI(unittest.TestCase):
    def invoke(self, dummy, user_input="", ollama=None):
        runner = CliRunner()
        ollama = ollama or DummyOllamaClient()
        with patch.object(cli, "GitClient", return_value=dummy):
            with patch.object(cli, "OllamaClient", return_value=ollama):
                return runner.invoke(cli.main, [], input=user_input)

    def test_not_a_repository(self) -> None:
        dummy = DummyGitClient(inside=False)
        result = self.invoke(dummy)
        self.assertEqual(result.exit_code, cli.EXIT_NO_REPO)
        self.assertEqual(dummy.stage_called, [])

    def test_no_changes(self) -> None:
        result = self.invoke(DummyGitClient(changed=[]))
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS)
        self.assertIn("No files to stage.", result.output)

    def test_manual_message_flow(self) -> None:
        dummy = DummyGitClient(changed=["src/api/x.py", "README.md"])
        user_input = answers(
            "1",             # stage src/api/x.py
            "2",             # type: fix
            "n",             # no AI
            "correct typo",  # message
            "1",             # commit
            "y",             # confirm commit
            "n",             # no push
        )
        result = self.invoke(dummy, user_input)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(dummy.stage_called, [["src/api/x.py"]])
        self.assertEqual(dummy.commit_called, ["fix (api): correct typo"])
        self.assertEqual(dummy.push_called, [])
        self.assertIn("You're all set!", result.output)

    def test_ai_message_flow_with_push(self) -> None:
        dummy = DummyGitClient(changed=["src/api/x.py"])
        ollama = DummyOllamaClient(fragments=["handle", " empty", " token"])
        user_input = answers("src", "", "y", "", "y", "y")
        result = self.invoke(dummy, user_input, ollama)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(dummy.commit_called, ["feat (api): handle empty token"])
        self.assertEqual(dummy.push_called, [("upstream", "origin", "main"), ("push",)])

    def test_cancel_unstages(self) -> None:
        dummy = DummyGitClient(changed=["src/api/x.py"])
        user_input = answers("all", "1", "n", "msg", "2")
        result = self.invoke(dummy, user_input)
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(dummy.unstage_called, 1)
        self.assertEqual(dummy.commit_called, [])
        self.assertIn("Commit aborted.", result.output)

    def test_end_of_input_cancels(self) -> None:
        dummy = DummyGitClient(changed=["src/api/x.py"])
        result = self.invoke(dummy, answers("1"))
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertEqual(dummy.unstage_called, 1)

    def test_git_failure_exit_code(self) -> None:
        dummy = DummyGitClient(changed=["a.txt"])

        def locked():
            raise GitError("index.lock exists")

        dummy.list_changed_paths = locked
        result = self.invoke(dummy)
        self.assertEqual(result.exit_code, cli.EXIT_VCS_FAILURE)

    def test_llm_failure_exit_code(self) -> None:
        dummy = DummyGitClient(changed=["src/api/x.py"])
        ollama = DummyOllamaClient(error=LLMError("connection refused"))
        result = self.invoke(dummy, answers("1", "1", "y"), ollama)
        self.assertEqual(result.exit_code, cli.EXIT_LLM_FAILURE)
        self.assertEqual(dummy.commit_called, [])

    def test_config_error_exit_code(self) -> None:
        from comet_cli.config.loader import ConfigError

        with patch.object(cli, "load_config", side_effect=ConfigError("'port' must be an integer")):
            result = CliRunner().invoke(cli.main, [])
        self.assertEqual(result.exit_code, cli.EXIT_CONFIG_ERROR)

    def test_unexpected_error_exit_code(self) -> None:
        dummy = DummyGitClient(changed=["a.txt"])

        def broken():
            raise RuntimeError("boom")

        dummy.is_inside_work_tree = broken
        result = self.invoke(dummy)
        self.assertEqual(result.exit_code, cli.EXIT_GENERIC_ERROR)

    def test_ollama_client_uses_config(self) -> None:
        with patch.object(cli, "OllamaClient", return_value=DummyOllamaClient()) as mock_client:
            with patch.object(cli, "GitClient", return_value=DummyGitClient(changed=[])):
                with patch.object(cli, "load_config", return_value={
                    "base_url": "http://gpu-box", "port": 9000, "model": "codellama",
                    "request_timeout": 5, "max_tokens": 80, "scope_root": "changeset", "remote": "origin",
                }):
                    CliRunner().invoke(cli.main, [])
        mock_client.assert_called_once_with(
            base_url="http://gpu-box", port=9000, model="codellama", request_timeout=5.0, max_tokens=80
        )

    def test_version(self) -> None:
        result = CliRunner().invoke(cli.main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("comet", result.output)


def fake_git_subprocess(cmd, **kwargs):
    stdout = "true\n" if cmd[1:] == ["rev-parse", "--is-inside-work-tree"] else ""
    return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")


class TestVerboseLogging(unittest.TestCase):
    def invoke(self, args):
        with patch("comet_cli.vcs.git_client.subprocess.run", side_effect=fake_git_subprocess):
            return CliRunner().invoke(cli.main, args)

    def test_verbose_shows_git_commands(self) -> None:
        result = self.invoke(["--verbose"])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertIn("DEBUG: Executing Git command: git rev-parse --is-inside-work-tree", result.output)
        self.assertIn("Executing Git command: git ls-files -z", result.output)

    def test_debug_hidden_without_verbose(self) -> None:
        result = self.invoke([])
        self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
        self.assertNotIn("Executing Git command", result.output)
        self.assertIn("No files to stage.", result.output)

    def test_enable_package_logging(self) -> None:
        git_logger = logging.getLogger("comet_cli.vcs.git_client")
        self.assertFalse(git_logger.propagate)
        cli.enable_package_logging()
        self.assertTrue(git_logger.propagate)
        self.assertTrue(logging.getLogger("comet_cli.wizard.engine").propagate)



def test_config_file_is_read(isolate_home_config):
    (isolate_home_config / "config.json").write_text(json.dumps({"scope_root": "web"}))
    dummy = DummyGitClient(changed=["web/pages/index.ts"])
    with patch.object(cli, "GitClient", return_value=dummy):
        with patch.object(cli, "OllamaClient", return_value=DummyOllamaClient()):
            result = CliRunner().invoke(cli.main, [], input=answers("1", "1", "n", "add page", "1", "y", "n"))
    assert result.exit_code == 0, result.output
    assert dummy.commit_called == ["feat (web): add page"]


if __name__ == "__main__":
    unittest.main()
