"""Live progress display for a running command."""

from typing import Protocol

from ignition import log


class ProgressHandle(Protocol):
    def report(self, message: str) -> None: ...

    def finish(self, message: str) -> None: ...


class TerminalHandle:
    def __init__(self, title: str, message: str, quiet: bool = False):
        self.title = title
        self.quiet = quiet
        self.finished = False
        log.header(title)
        log.step(message)

    def report(self, message: str) -> None:
        if self.finished:
            raise RuntimeError(f"progress for {self.title!r} already finished")
        if not self.quiet:
            log.step(message)

    def finish(self, message: str) -> None:
        if self.finished:
            raise RuntimeError(f"progress for {self.title!r} already finished")
        self.finished = True
        log.footer(message)


class TerminalProgress:
    """Creates one header/footer framed section per run."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def create(self, title: str, message: str) -> TerminalHandle:
        return TerminalHandle(title, message, quiet=self.quiet)
