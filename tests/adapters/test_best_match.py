"""
Tests for BestMatchAdapter and selection strategies.

Tests validate:
1. Text-matching and intent-matching retrieval
2. Fixed confidence by intent recognition
3. Abstention on no match, missing intent or storage failure
"""

import asyncio
import random

import pytest

from learnbot.adapters.base import AdapterResult
from learnbot.adapters.best_match import BestMatchAdapter
from learnbot.adapters.selection import (
    get_selection_strategy,
    random_selector,
    select_first,
    select_random,
)
from learnbot.conversation.statement import Statement
from learnbot.persistence.in_memory import InMemoryStorage


class FailingStorage(InMemoryStorage):
    async def filter(self, in_response_to=None, intent=None):
        raise OSError("storage offline")


@pytest.fixture
def storage():
    return InMemoryStorage(
        [
            Statement("how are you", in_response_to="hello", intent="ask_status"),
            Statement("hi there", in_response_to="hello", intent="greeting"),
            Statement("see you", in_response_to="bye", intent="greeting"),
        ]
    )


def process(adapter, statement, storage):
    return asyncio.run(adapter.process(statement, storage))


class TestTextMatching:
    def test_returns_stored_reply(self, storage):
        adapter = BestMatchAdapter(select=select_first)
        result = process(adapter, Statement("hello", intent="greeting"), storage)
        assert result.response.text == "how are you"
        assert result.confidence == 0.9

    def test_unknown_intent_confidence(self, storage):
        adapter = BestMatchAdapter(select=select_first)
        result = process(adapter, Statement("hello", intent="unknown"), storage)
        assert result.confidence == 0.3

    def test_custom_confidences(self, storage):
        adapter = BestMatchAdapter(
            select=select_first, known_intent_confidence=0.7, unknown_intent_confidence=0.1
        )
        assert process(adapter, Statement("hello", intent="greeting"), storage).confidence == 0.7
        assert process(adapter, Statement("hello", intent="unknown"), storage).confidence == 0.1

    def test_no_candidates_abstains(self, storage):
        result = process(BestMatchAdapter(), Statement("never seen", intent="greeting"), storage)
        assert result.response is None
        assert result.confidence == 0.0

    def test_storage_failure_abstains(self):
        result = process(BestMatchAdapter(), Statement("hello", intent="greeting"), FailingStorage())
        assert result.response is None
        assert result.confidence == 0.0

    def test_random_selection_picks_a_candidate(self, storage):
        adapter = BestMatchAdapter(select=random_selector(random.Random(3)))
        texts = {
            process(adapter, Statement("hello", intent="greeting"), storage).response.text
            for _ in range(20)
        }
        assert texts <= {"how are you", "hi there"}


class TestIntentMatching:
    def test_matches_on_intent(self, storage):
        adapter = BestMatchAdapter(match_on="intent", select=select_first)
        result = process(adapter, Statement("yo", intent="greeting"), storage)
        assert result.response.text == "hi there"
        assert result.confidence == 0.9

    def test_missing_intent_abstains(self, storage):
        adapter = BestMatchAdapter(match_on="intent")
        result = process(adapter, Statement("hello"), storage)
        assert result == AdapterResult.no_match()

    def test_rejects_unknown_match_on(self):
        with pytest.raises(ValueError):
            BestMatchAdapter(match_on="vibes")

    def test_name_defaults_to_class_name(self):
        assert BestMatchAdapter().name == "BestMatchAdapter"
        assert BestMatchAdapter(name="retrieval").name == "retrieval"


class TestSelection:
    def test_select_first(self):
        statements = [Statement("a"), Statement("b")]
        assert select_first(statements).text == "a"

    def test_select_random_with_seeded_rng(self):
        statements = [Statement("a"), Statement("b"), Statement("c")]
        first = select_random(statements, random.Random(7)).text
        second = select_random(statements, random.Random(7)).text
        assert first == second

    def test_get_selection_strategy(self):
        assert get_selection_strategy("first") is select_first
        assert get_selection_strategy("random") is select_random
        with pytest.raises(ValueError):
            get_selection_strategy("best")
