"""Tests for picker.py — fuzzy matching and the prompt picker."""

import click
import pytest

from ignition import picker as picker_mod
from ignition.picker import Item, PromptPicker, fuzzy_filter

ITEMS = [
    Item("Build Debug", "debug"),
    Item("Build Release", "release"),
    Item("Run Tests", "tests"),
    Item("Lint", "lint"),
]


@pytest.fixture
def answers(monkeypatch):
    """Feed scripted answers to click.prompt; an exception instance is raised instead."""
    queue = []
    prompts = []

    def fake_prompt(text, **kwargs):
        prompts.append(text)
        answer = queue.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    monkeypatch.setattr(picker_mod.click, "prompt", fake_prompt)
    return type("Answers", (), {"queue": queue, "prompts": prompts})()


def test_fuzzy_filter_drops_unrelated():
    assert fuzzy_filter("zzz", ITEMS) == []
    assert fuzzy_filter("xyz", [Item("Build", "b")]) == []


def test_fuzzy_filter_accepts_transposed_letters():
    items = [Item("Test", "test"), Item("Build", "build")]
    assert [i.payload for i in fuzzy_filter("tset", items)] == ["test"]


def test_fuzzy_filter_ignores_case():
    assert [i.payload for i in fuzzy_filter("LINT", ITEMS)] == ["lint"]


def test_fuzzy_filter_best_match_first():
    items = [Item("Build Release Integration", "long"), Item("Lint", "lint")]
    assert fuzzy_filter("lint", items)[0].payload == "lint"


def test_fuzzy_filter_orders_by_score():
    result = fuzzy_filter("rel", ITEMS)
    assert result[0].payload == "release"


def test_fuzzy_filter_ties_keep_order():
    result = fuzzy_filter("build", ITEMS)
    assert [i.payload for i in result] == ["debug", "release"]


def test_query_unique_match_selects_without_prompt(answers):
    assert PromptPicker(query="lint").show(ITEMS) == "lint"
    assert answers.prompts == []


def test_query_exact_label_wins(answers):
    items = [Item("Test", "t"), Item("Test All", "all")]
    assert PromptPicker(query="test").show(items) == "t"


def test_number_selects(answers, capsys):
    answers.queue.append("3")
    assert PromptPicker().show(ITEMS) == "tests"
    out = capsys.readouterr().out
    assert "Select Build Target" in out
    assert "  1) Build Debug" in out
    assert "  4) Lint" in out


def test_query_narrows_list(answers, capsys):
    answers.queue.append("2")
    assert PromptPicker(query="build").show(ITEMS) == "release"
    out = capsys.readouterr().out
    assert "Lint" not in out


def test_text_answer_filters_then_number(answers):
    answers.queue.extend(["build", "1"])
    assert PromptPicker().show(ITEMS) == "debug"


def test_text_answer_unique_match(answers):
    answers.queue.append("tests")
    assert PromptPicker().show(ITEMS) == "tests"


def test_invalid_number_reprompts(answers, capsys):
    answers.queue.extend(["9", "1"])
    assert PromptPicker().show(ITEMS) == "debug"
    assert "Invalid choice: 9" in capsys.readouterr().out


def test_no_match_reprompts(answers, capsys):
    answers.queue.extend(["zzz", "4"])
    assert PromptPicker().show(ITEMS) == "lint"
    assert "No targets match 'zzz'" in capsys.readouterr().out


def test_empty_answer_cancels(answers):
    answers.queue.append("")
    assert PromptPicker().show(ITEMS) is None


def test_abort_cancels(answers):
    answers.queue.append(click.Abort())
    assert PromptPicker().show(ITEMS) is None


def test_custom_title(answers, capsys):
    answers.queue.append("")
    PromptPicker(title="Pick one").show(ITEMS)
    assert "Pick one" in capsys.readouterr().out
