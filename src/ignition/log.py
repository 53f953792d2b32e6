"""Timestamped output + GitHub Actions formatting."""

import os
import sys
from datetime import datetime


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _is_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def _escape_data(msg: str) -> str:
    return msg.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def _annotate(kind: str, msg: str, title: str | None = None) -> None:
    """Emit a ::notice/::warning/::error workflow command."""
    props = f" title={_escape_property(title)}" if title else ""
    print(f"::{kind}{props}::{_escape_data(msg)}", flush=True)


def _marked(marker: str, msg: str) -> None:
    """First line carries the marker, continuation lines are indented under it."""
    first, *rest = msg.splitlines() or [""]
    info(f"  {marker} {first}")
    for line in rest:
        info(f"    {line}")


def info(msg: str) -> None:
    print(f"[{_timestamp()}] {msg}", flush=True)


def header(title: str) -> None:
    line = f"── {title} " + "─" * max(0, 45 - len(title))
    if _is_github_actions():
        print(f"::group::{title}", flush=True)
    info(line)


def footer(title: str) -> None:
    line = f"── {title} " + "─" * max(0, 45 - len(title))
    info(line)
    if _is_github_actions():
        print("::endgroup::", flush=True)


def step(msg: str) -> None:
    info(f"  {msg}")


def success(msg: str, title: str | None = None) -> None:
    if _is_github_actions():
        _annotate("notice", msg, title)
    _marked("✓", msg)


def warning(msg: str, title: str | None = None) -> None:
    if _is_github_actions():
        _annotate("warning", msg, title)
    _marked("!", msg)


def failure(msg: str, title: str | None = None) -> None:
    if _is_github_actions():
        _annotate("error", msg, title)
    _marked("✗", msg)


def error(msg: str) -> None:
    if _is_github_actions():
        _annotate("error", msg)
    print(f"[{_timestamp()}] ERROR: {msg}", file=sys.stderr, flush=True)
