"""Target picker: fuzzy matching plus a numbered terminal prompt."""

from dataclasses import dataclass
from typing import Any, Protocol

import click
from rapidfuzz import fuzz, process, utils


@dataclass(frozen=True)
class Item:
    label: str
    payload: Any


class Picker(Protocol):
    def show(self, items: list[Item]) -> Any | None: ...


FUZZY_SCORE_CUTOFF = 60


def fuzzy_filter(query: str, items: list[Item], score_cutoff: float = FUZZY_SCORE_CUTOFF) -> list[Item]:
    """Items whose label fuzzy-matches query, best score first, ties in original order."""
    matches = process.extract(
        query,
        [item.label for item in items],
        scorer=fuzz.WRatio,
        processor=utils.default_process,
        limit=None,
        score_cutoff=score_cutoff,
    )
    # matches is list of (label, score, index)
    matches = sorted(matches, key=lambda m: (-m[1], m[2]))
    return [items[m[2]] for m in matches]


def _exact(query: str, items: list[Item]) -> Item | None:
    for item in items:
        if item.label.casefold() == query.strip().casefold():
            return item
    return None


class PromptPicker:
    """Numbered list on the terminal.

    A number selects, text narrows the list by fuzzy match, empty input or
    Ctrl-C/EOF cancels. An initial query that matches exactly one label (or
    one label exactly) selects it without prompting.
    """

    def __init__(self, title: str = "Select Build Target", query: str | None = None):
        self.title = title
        self.query = query

    def show(self, items: list[Item]) -> Any | None:
        candidates = list(items)
        if self.query:
            hit = _exact(self.query, items)
            if hit is not None:
                return hit.payload
            matches = fuzzy_filter(self.query, items)
            if len(matches) == 1:
                return matches[0].payload
            if matches:
                candidates = matches
            else:
                click.echo(f"No targets match '{self.query}'")

        while True:
            click.echo(self.title)
            for number, item in enumerate(candidates, 1):
                click.echo(f"  {number}) {item.label}")
            try:
                answer = click.prompt(">", default="", show_default=False).strip()
            except click.Abort:
                return None
            if not answer:
                return None
            if answer.isdigit():
                number = int(answer)
                if 1 <= number <= len(candidates):
                    return candidates[number - 1].payload
                click.echo(f"Invalid choice: {answer}")
                continue
            hit = _exact(answer, items)
            if hit is not None:
                return hit.payload
            matches = fuzzy_filter(answer, items)
            if len(matches) == 1:
                return matches[0].payload
            if not matches:
                click.echo(f"No targets match '{answer}'")
                continue
            candidates = matches
