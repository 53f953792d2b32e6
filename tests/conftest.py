"""Shared test fixtures."""

import pytest


@pytest.fixture(autouse=True)
def _plain_terminal(monkeypatch):
    """Run outside GitHub Actions unless a test opts in."""
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)


class RecordingHandle:
    def __init__(self, title, message):
        self.title = title
        self.messages = [message]
        self.reports = []
        self.finishes = []

    def report(self, message):
        self.reports.append(message)

    def finish(self, message):
        self.finishes.append(message)


class RecordingProgress:
    def __init__(self):
        self.handles = []

    def create(self, title, message):
        handle = RecordingHandle(title, message)
        self.handles.append(handle)
        return handle


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def notify(self, message, level, title="", timeout_ms=0):
        self.calls.append((message, level, title, timeout_ms))


class RecordingPicker:
    def __init__(self, choose=0):
        self.choose = choose
        self.shown = []

    def show(self, items):
        self.shown.append(items)
        if self.choose is None:
            return None
        return items[self.choose].payload


@pytest.fixture
def progress():
    return RecordingProgress()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def picker():
    return RecordingPicker()


@pytest.fixture
def mock_spawn(monkeypatch):
    """Replace process.spawn; tests fire the recorded callbacks by hand."""
    from ignition import process

    calls = []

    class FakeHandle:
        def wait(self, timeout=None):
            return None

    def fake_spawn(command, args, cwd=None, on_stdout=None, on_stderr=None, on_exit=None):
        calls.append(
            {
                "command": command,
                "args": list(args),
                "cwd": cwd,
                "stdout": on_stdout,
                "stderr": on_stderr,
                "exit": on_exit,
            }
        )
        return FakeHandle()

    monkeypatch.setattr(process, "spawn", fake_spawn)
    return type("MockSpawn", (), {"calls": calls})()
