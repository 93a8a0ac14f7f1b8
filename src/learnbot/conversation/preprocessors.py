"""
Statement preprocessors.

Each preprocessor is a pure function Statement -> Statement. The chatbot
applies them left to right; the default order trims before lowercasing.
"""

from dataclasses import replace
from typing import Callable, Iterable, List

from learnbot.conversation.statement import Statement

Preprocessor = Callable[[Statement], Statement]


def clean_whitespace(statement: Statement) -> Statement:
    """Remove leading/trailing whitespace from the text."""
    return replace(statement, text=statement.text.strip())


def lowercase(statement: Statement) -> Statement:
    """Lowercase the text."""
    return replace(statement, text=statement.text.lower())


DEFAULT_PREPROCESSORS: List[Preprocessor] = [clean_whitespace, lowercase]


def apply_preprocessors(statement: Statement, preprocessors: Iterable[Preprocessor]) -> Statement:
    """Run the pipeline in order and return the final statement."""
    for preprocessor in preprocessors:
        statement = preprocessor(statement)
    return statement
