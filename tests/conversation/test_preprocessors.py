"""Unit tests for the input preprocessing pipeline."""

from learnbot.conversation.preprocessors import (
    DEFAULT_PREPROCESSORS,
    apply_preprocessors,
    clean_whitespace,
    lowercase,
)
from learnbot.conversation.statement import Statement


def test_clean_whitespace_trims():
    assert clean_whitespace(Statement("  hi there \n")).text == "hi there"


def test_lowercase():
    assert lowercase(Statement("Hi There")).text == "hi there"


def test_preprocessors_return_copies():
    original = Statement("  Hi  ")
    apply_preprocessors(original, DEFAULT_PREPROCESSORS)
    assert original.text == "  Hi  "


def test_default_pipeline_order():
    result = apply_preprocessors(Statement("  HeLLo  ", intent="greeting"), DEFAULT_PREPROCESSORS)
    assert result.text == "hello"
    assert result.intent == "greeting"


def test_custom_pipeline_runs_left_to_right():
    calls = []

    def first(statement):
        calls.append("first")
        return Statement(statement.text + "1")

    def second(statement):
        calls.append("second")
        return Statement(statement.text + "2")

    assert apply_preprocessors(Statement("x"), [first, second]).text == "x12"
    assert calls == ["first", "second"]
