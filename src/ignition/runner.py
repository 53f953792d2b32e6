"""Command runner: spawn, stream output to progress, finish with one notification.

Lifecycle is CREATED → RUNNING → SUCCEEDED | FAILED. Output and exit events
arrive on background threads and are scheduled onto the MainContext; every
progress and notifier call happens there.
"""

import enum
from dataclasses import dataclass

from ignition import process
from ignition.config import Config
from ignition.dispatch import MainContext
from ignition.resolver import Invocation

STDERR_PREFIX = "[stderr] "

# Reported as the exit code when the process could not be created
SPAWN_FAILED = 127


class State(enum.Enum):
    CREATED = "created"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Outcome:
    command_line: str
    exit_code: int
    tail: str
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and self.error is None


def tail(lines: list[str], count: int) -> str:
    """Last `count` lines joined by newlines, in original order."""
    if count <= 0:
        return ""
    return "\n".join(lines[-count:])


def describe_spawn_error(exc: Exception, invocation: Invocation) -> str:
    if isinstance(exc, FileNotFoundError) and exc.filename == invocation.cwd:
        return f"working directory not found: {invocation.cwd}"
    if isinstance(exc, FileNotFoundError):
        return f"command not found: {invocation.command}"
    if isinstance(exc, NotADirectoryError):
        return f"not a directory: {invocation.cwd}"
    if isinstance(exc, PermissionError):
        return f"permission denied: {exc.filename or invocation.command}"
    return f"could not start {invocation.command}: {exc}"


class CommandRunner:
    def __init__(self, invocation: Invocation, config: Config, context: MainContext, progress, notifier):
        self.invocation = invocation
        self.config = config
        self.context = context
        self.progress = progress
        self.notifier = notifier
        self.state = State.CREATED
        self.output_lines: list[str] = []
        self.exit_code: int | None = None
        self.outcome: Outcome | None = None
        self._progress_handle = None

    @property
    def finished(self) -> bool:
        return self.exit_code is not None

    def start(self) -> "CommandRunner":
        """Create the progress display and spawn the process. Returns without waiting."""
        if self.state is not State.CREATED:
            raise RuntimeError(f"runner already {self.state.value}")
        self.state = State.RUNNING
        inv = self.invocation
        self._progress_handle = self.progress.create(
            self.config.title_prefix + inv.title, self.config.progress.start
        )
        try:
            process.spawn(
                inv.command,
                inv.args,
                cwd=inv.cwd,
                on_stdout=lambda line: self.context.schedule(self._on_line, line, False),
                on_stderr=lambda line: self.context.schedule(self._on_line, line, True),
                on_exit=lambda code: self.context.schedule(self._on_exit, code),
            )
        except (OSError, ValueError) as e:
            self._finish(SPAWN_FAILED, error=describe_spawn_error(e, inv))
        return self

    def _on_line(self, line: str, is_stderr: bool) -> None:
        if self.finished or not line:
            return
        if is_stderr:
            line = STDERR_PREFIX + line
        self.output_lines.append(line)
        self._progress_handle.report(line)

    def _on_exit(self, code: int) -> None:
        if self.finished:
            return
        self._finish(code)

    def _finish(self, code: int, error: str | None = None) -> None:
        self.exit_code = code
        cfg = self.config
        command_line = self.invocation.command_line
        output_tail = error if error is not None else tail(self.output_lines, cfg.tail_lines)
        self.outcome = Outcome(command_line=command_line, exit_code=code, tail=output_tail, error=error)

        if self.outcome.succeeded:
            self.state = State.SUCCEEDED
            self._progress_handle.finish(cfg.progress.success)
            notice = cfg.success
        else:
            self.state = State.FAILED
            self._progress_handle.finish(cfg.progress.failure.format(code=code))
            notice = cfg.failure

        message = notice.message.format(command=command_line, code=code, tail=output_tail)
        self.notifier.notify(
            message.rstrip(), notice.level, title=notice.title, timeout_ms=notice.timeout_ms
        )
