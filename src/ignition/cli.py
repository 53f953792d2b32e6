"""Click entry point — all commands."""

import sys

import click

from ignition import __version__, config, launcher, log, resolver
from ignition.notify import TerminalNotifier
from ignition.picker import PromptPicker
from ignition.progress import TerminalProgress


@click.group()
@click.version_option(version=__version__, prog_name="ignition")
@click.option("--config", "config_path", default=None, help="Targets file (default: $IGNITION_CONFIG or .ignition.yml)")
@click.option("--file", "current_file", default=None, help="Current file, expanded into {file} placeholders")
@click.pass_context
def main(ctx, config_path, current_file):
    """Pick a build target and run it with live progress."""
    ctx.obj = {"config_path": config_path, "context": config.Context(file=current_file)}


def _load(ctx) -> config.Config:
    try:
        return config.load(ctx.obj["config_path"], context=ctx.obj["context"])
    except config.ConfigError as e:
        log.error(str(e))
        sys.exit(1)


def _exit_status(code: int) -> int:
    # Killed by a signal: follow the shell's 128+N convention
    return 128 - code if code < 0 else code


@main.command()
@click.argument("query", required=False)
@click.option("--quiet", "-q", is_flag=True, help="Do not stream output lines")
@click.pass_context
def run(ctx, query, quiet):
    """Select a target (optionally narrowed by QUERY) and run it."""
    cfg = _load(ctx)
    try:
        code = launcher.launch(
            cfg,
            picker=PromptPicker(cfg.prompt_title, query=query),
            progress=TerminalProgress(quiet=quiet),
            notifier=TerminalNotifier(),
        )
    except config.ConfigError as e:
        log.error(str(e))
        sys.exit(1)
    sys.exit(_exit_status(code))


@main.command(name="list")
@click.option("--all", "show_all", is_flag=True, help="Include disabled targets")
@click.pass_context
def list_cmd(ctx, show_all):
    """Show targets and the command each one runs."""
    cfg = _load(ctx)
    targets = cfg.targets if show_all else resolver.enabled_targets(cfg.targets)
    if not targets:
        log.info("No targets available")
        return
    for target in targets:
        marker = "" if resolver.is_enabled(target) else " (disabled)"
        log.info(f"{target.display}{marker}")
        try:
            inv = resolver.resolve_target(target)
        except config.ConfigError as e:
            log.step(f"unresolved: {e}")
            continue
        log.step(f"{inv.command_line}  (in {inv.cwd})")


if __name__ == "__main__":
    main()
