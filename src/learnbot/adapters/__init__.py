"""
adapters: Logic Adapter Module

Contains the logic adapter interface and its implementations.
Each adapter proposes a candidate response with a confidence; the
chatbot picks the most confident one.
"""

from learnbot.adapters.base import AdapterResult, LogicAdapter
from learnbot.adapters.best_match import BestMatchAdapter
from learnbot.adapters.selection import (
    SelectionStrategy,
    get_selection_strategy,
    random_selector,
    select_first,
    select_random,
)
from learnbot.adapters.time_adapter import TimeLogicAdapter

__all__ = [
    "AdapterResult",
    "LogicAdapter",
    "BestMatchAdapter",
    "TimeLogicAdapter",
    "SelectionStrategy",
    "get_selection_strategy",
    "random_selector",
    "select_first",
    "select_random",
]
