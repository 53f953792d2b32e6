"""Pick a target and run it to completion."""

from ignition import resolver
from ignition.config import Config
from ignition.dispatch import MainContext
from ignition.picker import Item
from ignition.runner import CommandRunner


def launch(config: Config, picker, progress, notifier, context: MainContext | None = None) -> int:
    """Filter enabled targets, ask the picker, run the selection.

    Returns the subprocess exit code, 0 if the picker was cancelled, or 1
    if no target is enabled.
    """
    candidates = resolver.enabled_targets(config.targets)
    if not candidates:
        empty = config.empty
        notifier.notify(empty.message, empty.level, title=empty.title, timeout_ms=empty.timeout_ms)
        return 1

    target = picker.show([Item(label=t.display, payload=t) for t in candidates])
    if target is None:
        return 0

    invocation = resolver.resolve_target(target)
    context = context or MainContext()
    runner = CommandRunner(invocation, config, context, progress, notifier).start()
    context.run_until(lambda: runner.finished)
    return runner.exit_code
