"""
Response selection strategies.

A strategy picks one statement out of equally valid candidates. It is
injected into BestMatchAdapter so tests can make the choice deterministic.
"""

import random
from typing import Callable, Optional, Sequence

from learnbot.config.constants import SELECTION_FIRST, SELECTION_RANDOM
from learnbot.conversation.statement import Statement

SelectionStrategy = Callable[[Sequence[Statement]], Statement]


def select_first(statements: Sequence[Statement]) -> Statement:
    """Always pick the first candidate (storage order)."""
    return statements[0]


def select_random(statements: Sequence[Statement], rng: Optional[random.Random] = None) -> Statement:
    """Pick a candidate uniformly at random."""
    return (rng or random).choice(list(statements))


def random_selector(rng: random.Random) -> SelectionStrategy:
    """select_random bound to a specific (e.g. seeded) generator."""

    def _select(statements: Sequence[Statement]) -> Statement:
        return select_random(statements, rng)

    return _select


def get_selection_strategy(name: str) -> SelectionStrategy:
    """
    Resolve a strategy by its settings name.

    Raises:
        ValueError: If the name is unknown
    """
    strategies = {
        SELECTION_RANDOM: select_random,
        SELECTION_FIRST: select_first,
    }
    try:
        return strategies[name]
    except KeyError:
        raise ValueError(
            f"Unknown selection strategy {name!r}, expected one of {sorted(strategies)}"
        ) from None
