"""Launcher configuration: defaults, deep merge, YAML target files."""

import copy
import os
import re
import shutil
import string
from dataclasses import dataclass
from pathlib import Path

import yaml

from ignition.lazy import Fixed, Lazy, Provider, lazy
from ignition.notify import Level

CONFIG_FILE = ".ignition.yml"

DEFAULTS = {
    "targets": [],
    "tail_lines": 10,
    "title_prefix": "",
    "prompt_title": "Select Build Target",
    "progress": {
        "start": "Starting...",
        "success": "Build complete!",
        "failure": "Build failed with code {code}",
    },
    "notify": {
        "success": {
            "message": "Build succeeded: {command}",
            "title": "Build Complete",
            "timeout_ms": 2000,
            "level": "info",
        },
        "failure": {
            "message": "Build failed: {command}\n\n{tail}",
            "title": "Build Failed",
            "timeout_ms": 5000,
            "level": "error",
        },
        "empty": {
            "message": "No targets available",
            "title": "Ignition",
            "timeout_ms": 3000,
            "level": "warn",
        },
    },
}

# Fields each message template may reference
_TEMPLATE_FIELDS = {
    "progress.start": set(),
    "progress.success": set(),
    "progress.failure": {"code"},
    "notify.success": {"command", "code"},
    "notify.failure": {"command", "code", "tail"},
    "notify.empty": set(),
}

_PLACEHOLDER = re.compile(r"\{(file|file_dir|file_stem|cwd)\}")

_CONDITIONS = ("exists", "which", "env", "file_suffix")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Context:
    """Editor state that target placeholders are expanded against."""

    file: str | None = None

    def values(self) -> dict[str, str]:
        values = {"cwd": os.getcwd()}
        if self.file:
            path = Path(self.file).resolve()
            values.update(file=str(path), file_dir=str(path.parent), file_stem=path.stem)
        return values

    def expand(self, template: str) -> str:
        """Replace {file}, {file_dir}, {file_stem} and {cwd} in template."""
        values = self.values()

        def _sub(match: re.Match) -> str:
            name = match.group(1)
            if name not in values:
                raise ConfigError(f"'{{{name}}}' needs a current file (pass --file)")
            return values[name]

        return _PLACEHOLDER.sub(_sub, template)


@dataclass(frozen=True)
class Target:
    display: str
    command: str
    args: Lazy = Fixed(())
    cwd: Lazy = Fixed(None)
    enabled: Lazy = Fixed(True)


@dataclass(frozen=True)
class Notice:
    message: str
    title: str
    timeout_ms: int
    level: Level


@dataclass(frozen=True)
class ProgressMessages:
    start: str
    success: str
    failure: str


@dataclass(frozen=True)
class Config:
    progress: ProgressMessages
    success: Notice
    failure: Notice
    empty: Notice
    targets: tuple[Target, ...] = ()
    tail_lines: int = 10
    title_prefix: str = ""
    prompt_title: str = "Select Build Target"


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into a copy of base. Nested dicts merge, everything else replaces."""
    merged = copy.copy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _check_template(name: str, template) -> str:
    if not isinstance(template, str):
        raise ConfigError(f"{name} must be a string")
    allowed = _TEMPLATE_FIELDS[name]
    try:
        fields = {f for _, f, _, _ in string.Formatter().parse(template) if f is not None}
    except ValueError as e:
        raise ConfigError(f"{name}: {e}") from e
    unknown = fields - allowed
    if unknown:
        raise ConfigError(f"{name} uses unknown field(s): {', '.join(sorted(unknown))}")
    return template


def _parse_notice(name: str, raw: dict) -> Notice:
    key = f"notify.{name}"
    if not isinstance(raw, dict):
        raise ConfigError(f"{key} must be a mapping")
    try:
        level = Level.parse(raw["level"])
    except ValueError as e:
        raise ConfigError(f"{key}.level: unknown level {raw['level']!r}") from e
    timeout = raw["timeout_ms"]
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 0:
        raise ConfigError(f"{key}.timeout_ms must be a non-negative integer")
    return Notice(
        message=_check_template(key, raw["message"]),
        title=str(raw["title"]),
        timeout_ms=timeout,
        level=level,
    )


def _as_list(value) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _conditions_provider(conditions: dict, context: Context, where: str) -> Provider:
    unknown = set(conditions) - set(_CONDITIONS)
    if unknown:
        raise ConfigError(f"{where}.enabled: unknown condition(s) {', '.join(sorted(unknown))}")

    def _enabled() -> bool:
        for path in _as_list(conditions.get("exists", [])):
            if not os.path.exists(context.expand(path)):
                return False
        for exe in _as_list(conditions.get("which", [])):
            if shutil.which(exe) is None:
                return False
        for var in _as_list(conditions.get("env", [])):
            if not os.environ.get(var):
                return False
        if "file_suffix" in conditions:
            suffixes = tuple(_as_list(conditions["file_suffix"]))
            if not context.file or not context.file.endswith(suffixes):
                return False
        return True

    return Provider(_enabled)


def _args_field(value, context: Context, where: str) -> Lazy:
    if value is None:
        return Fixed(())
    if isinstance(value, (Fixed, Provider)) or callable(value):
        return lazy(value)
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{where}.args must be a list")
    items = [str(a) for a in value]
    if any(_PLACEHOLDER.search(a) for a in items):
        return Provider(lambda: [context.expand(a) for a in items])
    return Fixed(tuple(items))


def _cwd_field(value, context: Context, base_dir: str | None, where: str) -> Lazy:
    if value is None or isinstance(value, (Fixed, Provider)) or callable(value):
        return lazy(value)
    if not isinstance(value, str):
        raise ConfigError(f"{where}.cwd must be a string")

    def _absolute(path: str) -> str:
        path = os.path.expanduser(path)
        if base_dir and not os.path.isabs(path):
            path = os.path.join(base_dir, path)
        return path

    if _PLACEHOLDER.search(value):
        return Provider(lambda: _absolute(context.expand(value)))
    return Fixed(_absolute(value))


def _enabled_field(value, context: Context, where: str) -> Lazy:
    if value is None:
        return Fixed(True)
    if isinstance(value, dict):
        return _conditions_provider(value, context, where)
    return lazy(value)


def _parse_target(entry, index: int, context: Context, base_dir: str | None) -> Target:
    if isinstance(entry, Target):
        return entry
    where = f"targets[{index}]"
    if not isinstance(entry, dict):
        raise ConfigError(f"{where} must be a mapping")

    # Accept both flat entries and the {display, enabled, value: {...}} form
    value = entry.get("value", entry)
    if not isinstance(value, dict):
        raise ConfigError(f"{where}.value must be a mapping")
    command = value.get("command")
    if not command or not isinstance(command, str):
        raise ConfigError(f"{where} is missing a command")

    return Target(
        display=str(entry.get("display") or command),
        command=command,
        args=_args_field(value.get("args"), context, where),
        cwd=_cwd_field(value.get("cwd"), context, base_dir, where),
        enabled=_enabled_field(entry.get("enabled"), context, where),
    )


def setup(
    options: dict | None = None,
    context: Context | None = None,
    base_dir: str | None = None,
) -> Config:
    """Build a Config from user options deep-merged over DEFAULTS.

    Target lists replace the default list wholesale. Raises ConfigError on
    malformed options.
    """
    context = context or Context()
    if options is not None and not isinstance(options, dict):
        raise ConfigError("configuration must be a mapping")
    merged = _deep_merge(DEFAULTS, options or {})

    tail_lines = merged["tail_lines"]
    if isinstance(tail_lines, bool) or not isinstance(tail_lines, int) or tail_lines < 0:
        raise ConfigError("tail_lines must be a non-negative integer")

    targets = merged["targets"] or []
    if not isinstance(targets, (list, tuple)):
        raise ConfigError("targets must be a list")

    progress = merged["progress"]
    if not isinstance(progress, dict):
        raise ConfigError("progress must be a mapping")
    notify = merged["notify"]
    if not isinstance(notify, dict):
        raise ConfigError("notify must be a mapping")
    return Config(
        progress=ProgressMessages(
            start=_check_template("progress.start", progress["start"]),
            success=_check_template("progress.success", progress["success"]),
            failure=_check_template("progress.failure", progress["failure"]),
        ),
        success=_parse_notice("success", notify["success"]),
        failure=_parse_notice("failure", notify["failure"]),
        empty=_parse_notice("empty", notify["empty"]),
        targets=tuple(_parse_target(t, i, context, base_dir) for i, t in enumerate(targets)),
        tail_lines=tail_lines,
        title_prefix=str(merged["title_prefix"]),
        prompt_title=str(merged["prompt_title"]),
    )


def config_path() -> str:
    """IGNITION_CONFIG env → .ignition.yml in the current directory."""
    return os.environ.get("IGNITION_CONFIG") or CONFIG_FILE


def load(path: str | None = None, context: Context | None = None) -> Config:
    """Read a YAML config file and build a Config from it.

    Relative target cwds are taken relative to the file's directory.
    """
    path = path or config_path()
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    base_dir = os.path.dirname(os.path.abspath(path))
    return setup(data or {}, context=context, base_dir=base_dir)
