import logging

import pytest

from comet_cli.config import loader


@pytest.fixture(autouse=True)
def isolate_home_config(tmp_path, monkeypatch):
    """Point the configuration directory at an empty temporary directory.

    Keeps a real ``~/.comet/config.json`` on the developer's machine from
    leaking into the tests.
    """
    config_dir = tmp_path / "comet_home"
    config_dir.mkdir()
    monkeypatch.setattr(loader, "_get_config_directory", lambda: config_dir)
    return config_dir


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the logging configuration done by ``main``.

    ``main`` points the root handlers at the stream of the current
    CliRunner invocation, which is closed once the invocation returns.
    """
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, candidate in logging.Logger.manager.loggerDict.items():
        if isinstance(candidate, logging.Logger) and name.startswith("comet_cli"):
            candidate.propagate = False


class RecordingSpinner:
    def __init__(self):
        self.events = []

    def start(self, message):
        self.events.append(("start", message))

    def message(self, text):
        self.events.append(("message", text))

    def stop(self, message=None, ok=True):
        self.events.append(("stop", message, ok))


class ScriptedPrompter:
    """Prompter double answering from per-kind queues.

    A queued exception instance is raised instead of returned, which
    simulates the user pressing Ctrl-C at that prompt.
    """

    def __init__(self, selects=(), multiselects=(), texts=(), confirms=()):
        self.selects = list(selects)
        self.multiselects = list(multiselects)
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.asked = []
        self.text_calls = []
        self.notes = []
        self.outros = []
        self.messages = []
        self._spinner = RecordingSpinner()

    @staticmethod
    def _next(queue, kind):
        if not queue:
            raise AssertionError(f"Unexpected {kind} prompt")
        value = queue.pop(0)
        if isinstance(value, BaseException):
            raise value
        return value

    def spinner(self):
        return self._spinner

    def select(self, message, options, default=None):
        self.asked.append(("select", message))
        return self._next(self.selects, "select")

    def group_multiselect(self, message, groups, required=True):
        self.asked.append(("group_multiselect", message))
        return self._next(self.multiselects, "group_multiselect")

    def text(self, message, initial_value=None):
        self.asked.append(("text", message))
        self.text_calls.append((message, initial_value))
        return self._next(self.texts, "text")

    def confirm(self, message, default=True):
        self.asked.append(("confirm", message))
        return self._next(self.confirms, "confirm")

    def note(self, title, body):
        self.notes.append(body)

    def intro(self, title):
        self.messages.append(("intro", title))

    def outro(self, message):
        self.outros.append(message)

    def info(self, message):
        self.messages.append(("info", message))

    def warning(self, message):
        self.messages.append(("warning", message))

    def error(self, message):
        self.messages.append(("error", message))


class FakeRepo:
    """In-memory stand-in for :class:`GitClient` recording side effects."""

    def __init__(self, changed=(), inside=True, diff="diff --git a/x b/x\n+x\n", branch="main"):
        self.changed = list(changed)
        self.inside = inside
        self.diff = diff
        self.branch = branch
        self.staged = []
        self.stage_calls = []
        self.unstage_calls = 0
        self.commits = []
        self.upstream_pushes = []
        self.pushes = 0
        self.diff_calls = 0

    def is_inside_work_tree(self):
        return self.inside

    def list_changed_paths(self):
        return list(self.changed)

    def stage(self, paths):
        self.stage_calls.append(list(paths))
        self.staged.extend(paths)

    def unstage_all(self):
        self.unstage_calls += 1
        self.staged = []

    def staged_diff(self):
        self.diff_calls += 1
        return self.diff

    def commit(self, message):
        self.commits.append(message)

    def get_current_branch(self):
        return self.branch

    def push_with_upstream(self, branch, remote="origin"):
        self.upstream_pushes.append((remote, branch))

    def push(self):
        self.pushes += 1


class FakeCompletionClient:
    """Completion double yielding one scripted fragment list per call."""

    def __init__(self, attempts):
        self.attempts = list(attempts)
        self.calls = []

    def stream_chat(self, system, content):
        self.calls.append((system, content))
        fragments = self.attempts.pop(0)
        for fragment in fragments:
            if isinstance(fragment, Exception):
                raise fragment
            yield fragment


@pytest.fixture
def scripted_prompter():
    return ScriptedPrompter


@pytest.fixture
def fake_repo():
    return FakeRepo


@pytest.fixture
def fake_completion():
    return FakeCompletionClient
