"""Turn configured targets into concrete invocations."""

import os
from dataclasses import dataclass

from ignition.config import ConfigError, Target
from ignition.lazy import resolve


@dataclass(frozen=True)
class Invocation:
    command: str
    args: tuple[str, ...]
    cwd: str
    title: str

    @property
    def command_line(self) -> str:
        """Command and args space-joined, for display only."""
        return " ".join([self.command, *self.args])


def is_enabled(target: Target) -> bool:
    return bool(resolve(target.enabled))


def enabled_targets(targets) -> list[Target]:
    """Evaluate every target's enabled predicate, keeping config order."""
    return [t for t in targets if is_enabled(t)]


def resolve_target(target: Target, title: str | None = None) -> Invocation:
    """Evaluate a target's lazy args and cwd.

    Providers run synchronously on the calling thread. A missing or empty
    cwd falls back to the current working directory.
    """
    args = resolve(target.args)
    if args is None:
        args = ()
    if isinstance(args, (str, bytes)) or not hasattr(args, "__iter__"):
        raise ConfigError(f"args for {target.display!r} must be a list, got {type(args).__name__}")
    cwd = resolve(target.cwd) or os.getcwd()
    return Invocation(
        command=target.command,
        args=tuple(str(a) for a in args),
        cwd=str(cwd),
        title=title if title is not None else target.display,
    )
