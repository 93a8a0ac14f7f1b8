"""
Unit tests for Statement records.

Tests validate:
1. Case-insensitive storage keys
2. Persisted record shape and tolerant parsing
3. The merge rule used by upsert
"""

from datetime import datetime

import pytest

from learnbot.conversation.entity import Entity
from learnbot.conversation.statement import Statement, normalize_key


class TestNormalizeKey:
    def test_lowercases(self):
        assert normalize_key("Hello There") == "hello there"

    @pytest.mark.parametrize("value", [None, "", "   ", 42, ["hi"]])
    def test_invalid_text_has_no_key(self, value):
        assert normalize_key(value) is None

    def test_same_record_ignores_case(self):
        assert Statement("Hello").same_record(Statement("hello"))
        assert not Statement("").same_record(Statement(""))


class TestSerialization:
    def test_serialize_leaves_out_confidence(self):
        statement = Statement(
            "hi",
            in_response_to="hello",
            intent="greeting",
            entities=[Entity("number", "3", 0)],
            confidence=0.9,
        )
        data = statement.serialize()
        assert "confidence" not in data
        assert data["text"] == "hi"
        assert data["in_response_to"] == "hello"
        assert data["entities"] == [{"kind": "number", "value": "3", "position": 0}]

    def test_deserialize_restores_fields(self):
        original = Statement("hi", in_response_to="hello", intent="greeting", conversation="c1")
        restored = Statement.deserialize(original.serialize())
        assert restored.text == "hi"
        assert restored.in_response_to == "hello"
        assert restored.intent == "greeting"
        assert restored.conversation == "c1"
        assert restored.timestamp == original.timestamp
        assert restored.confidence == 0.0

    def test_deserialize_epoch_millis_timestamp(self):
        restored = Statement.deserialize({"text": "hi", "timestamp": 1_700_000_000_000})
        assert restored.timestamp == datetime.fromtimestamp(1_700_000_000)

    def test_deserialize_bad_timestamp_falls_back_to_now(self):
        before = datetime.now()
        restored = Statement.deserialize({"text": "hi", "timestamp": "yesterday-ish"})
        assert restored.timestamp >= before

    def test_deserialize_ignores_wrongly_typed_optionals(self):
        restored = Statement.deserialize({"text": "hi", "in_response_to": 5, "intent": ["x"]})
        assert restored.in_response_to is None
        assert restored.intent is None

    @pytest.mark.parametrize("data", [None, "hi", {}, {"text": None}, {"text": 3}])
    def test_deserialize_rejects_invalid_records(self, data):
        with pytest.raises(ValueError):
            Statement.deserialize(data)


class TestMerge:
    def test_incoming_fields_win(self):
        stored = Statement("a", in_response_to="x", intent="greeting")
        merged = stored.merged_with(Statement("A", in_response_to="y", intent="goodbye"))
        assert merged.text == "A"
        assert merged.in_response_to == "y"
        assert merged.intent == "goodbye"

    def test_none_does_not_clear(self):
        stored = Statement("a", in_response_to="x", intent="greeting", entities=[Entity("number", "1")])
        merged = stored.merged_with(Statement("a"))
        assert merged.in_response_to == "x"
        assert merged.intent == "greeting"
        assert merged.entities == [Entity("number", "1")]

    def test_newer_timestamp_and_reset_confidence(self):
        stored = Statement("a", timestamp=datetime(2020, 1, 1), confidence=0.5)
        incoming = Statement("a", timestamp=datetime(2021, 1, 1))
        merged = stored.merged_with(incoming)
        assert merged.timestamp == datetime(2021, 1, 1)
        assert merged.confidence == 0.0

    def test_merge_returns_new_object(self):
        stored = Statement("a", in_response_to="x")
        stored.merged_with(Statement("a", in_response_to="y"))
        assert stored.in_response_to == "x"
