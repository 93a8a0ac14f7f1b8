"""
Unit tests for InMemoryStorage.

Tests validate:
1. Idempotent, case-insensitive upsert
2. The merge rule
3. Filter safety for missing or invalid criteria
4. Callers can't mutate stored records
"""

import asyncio

import pytest

from learnbot.conversation.entity import Entity
from learnbot.conversation.statement import Statement
from learnbot.persistence.in_memory import InMemoryStorage


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def storage():
    return InMemoryStorage()


class TestUpsert:
    def test_identical_updates_leave_one_record(self, storage):
        run(storage.update(Statement("hi", in_response_to="hello")))
        run(storage.update(Statement("hi", in_response_to="hello")))
        assert run(storage.count()) == 1

    def test_merge_replaces_in_response_to(self, storage):
        run(storage.update(Statement("a", in_response_to="x")))
        run(storage.update(Statement("a", in_response_to="y")))
        assert run(storage.count()) == 1
        assert run(storage.find("a")).in_response_to == "y"

    def test_update_keys_case_insensitively(self, storage):
        run(storage.update(Statement("Hello", intent="greeting")))
        run(storage.update(Statement("HELLO", in_response_to="hi")))
        stored = run(storage.find("hello"))
        assert run(storage.count()) == 1
        assert stored.text == "HELLO"
        assert stored.intent == "greeting"
        assert stored.in_response_to == "hi"

    def test_none_fields_do_not_clear(self, storage):
        run(storage.update(Statement("a", in_response_to="x", intent="greeting")))
        run(storage.update(Statement("a")))
        stored = run(storage.find("a"))
        assert stored.in_response_to == "x"
        assert stored.intent == "greeting"

    @pytest.mark.parametrize("text", ["", "   ", None, 7])
    def test_invalid_text_is_skipped(self, storage, text):
        assert run(storage.update(Statement(text))) is None
        assert run(storage.count()) == 0

    def test_confidence_is_not_stored(self, storage):
        run(storage.update(Statement("a", confidence=0.9)))
        assert run(storage.find("a")).confidence == 0.0

    def test_initial_statements(self):
        storage = InMemoryStorage([Statement("a"), Statement("A"), Statement("b")])
        assert run(storage.count()) == 2


class TestFind:
    def test_find_ignores_case(self, storage):
        run(storage.update(Statement("hello")))
        assert run(storage.find("Hello")).text == "hello"

    def test_find_missing(self, storage):
        assert run(storage.find("nope")) is None
        assert run(storage.find(None)) is None
        assert run(storage.find("")) is None


class TestFilter:
    @pytest.fixture
    def populated(self, storage):
        run(storage.update(Statement("how are you", in_response_to="hello", intent="ask_status")))
        run(storage.update(Statement("hi there", in_response_to="Hello", intent="greeting")))
        run(storage.update(Statement("bye", in_response_to="see you", intent="goodbye")))
        return storage

    def test_filter_by_in_response_to(self, populated):
        texts = [s.text for s in run(populated.filter(in_response_to="HELLO"))]
        assert texts == ["how are you", "hi there"]

    def test_filter_by_intent(self, populated):
        assert [s.text for s in run(populated.filter(intent="greeting"))] == ["hi there"]

    def test_filter_by_both(self, populated):
        result = run(populated.filter(in_response_to="hello", intent="ask_status"))
        assert [s.text for s in result] == ["how are you"]

    def test_empty_filter_is_empty(self, populated):
        assert run(populated.filter()) == []
        assert run(populated.filter(in_response_to=None)) == []

    def test_invalid_criterion_does_not_widen_match(self, populated):
        assert run(populated.filter(in_response_to="   ", intent="greeting")) == []
        assert run(populated.filter(in_response_to="hello", intent="")) == []


class TestIsolation:
    def test_returned_records_are_copies(self, storage):
        run(storage.update(Statement("a", entities=[Entity("number", "1")])))
        found = run(storage.find("a"))
        found.in_response_to = "mutated"
        found.entities.append(Entity("number", "2"))
        stored = run(storage.find("a"))
        assert stored.in_response_to is None
        assert len(stored.entities) == 1

    def test_caller_statement_is_not_stored_by_reference(self, storage):
        statement = Statement("a", in_response_to="x")
        run(storage.update(statement))
        statement.in_response_to = "mutated"
        assert run(storage.find("a")).in_response_to == "x"
