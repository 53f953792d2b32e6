"""Subprocess spawning — the single mock seam for all tests."""

import subprocess
import threading
import time
from typing import IO, Callable

LineCallback = Callable[[str], None]
ExitCallback = Callable[[int], None]

# Seconds the readers get to drain after the process exits. A background
# descendant that inherited the pipes can hold them open much longer.
DRAIN_TIMEOUT = 1.0


def _ignore(_value) -> None:
    pass


def decode_line(raw: bytes) -> str:
    """Decode one line of output and drop its terminator. Never raises."""
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


def _pump(stream: IO[bytes], callback: LineCallback) -> None:
    """Forward every line of a pipe, including a trailing partial line at EOF."""
    with stream:
        for raw in iter(stream.readline, b""):
            callback(decode_line(raw))


def _watch(
    proc: subprocess.Popen,
    readers: list[threading.Thread],
    on_exit: ExitCallback,
    drain_timeout: float,
) -> None:
    code = proc.wait()
    deadline = time.monotonic() + drain_timeout
    for reader in readers:
        reader.join(max(0.0, deadline - time.monotonic()))
    # Readers still blocked belong to an orphaned descendant; they keep running
    # as daemons and close their pipe at EOF.
    on_exit(code)


class Handle:
    """A spawned subprocess plus the threads reading its output."""

    def __init__(self, proc: subprocess.Popen, waiter: threading.Thread):
        self.proc = proc
        self._waiter = waiter

    def wait(self, timeout: float | None = None) -> int | None:
        """Block until the exit callback has run. Returns the exit code, or None on timeout."""
        self._waiter.join(timeout)
        if self._waiter.is_alive():
            return None
        return self.proc.returncode


def spawn(
    command: str,
    args: list[str] | tuple[str, ...],
    cwd: str | None = None,
    on_stdout: LineCallback = _ignore,
    on_stderr: LineCallback = _ignore,
    on_exit: ExitCallback = _ignore,
    drain_timeout: float = DRAIN_TIMEOUT,
) -> Handle:
    """Start a command with a literal argument list and stream its output.

    Callbacks fire on background threads: one per stream for lines, and a
    watcher thread for the exit code. The exit is reported once the process
    has exited and both streams hit EOF, or drain_timeout seconds after the
    exit if a descendant still holds a pipe open. Raises
    OSError if the process cannot be created (missing executable, bad cwd).
    """
    proc = subprocess.Popen(
        [command, *args],
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    readers = [
        threading.Thread(target=_pump, args=(proc.stdout, on_stdout), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, on_stderr), daemon=True),
    ]
    for reader in readers:
        reader.start()
    waiter = threading.Thread(target=_watch, args=(proc, readers, on_exit, drain_timeout), daemon=True)
    waiter.start()
    return Handle(proc, waiter)
