"""Unit tests for entity extraction."""

from learnbot.conversation.entity import Entity, EntityExtractor


class TestEntityExtractor:
    def test_builtin_kinds_in_position_order(self):
        entities = EntityExtractor().extract("mail me at ann@example.com at 10:30")
        assert entities == [
            Entity("email", "ann@example.com", 11),
            Entity("time", "10:30", 30),
        ]

    def test_numbers_not_double_counted_inside_other_entities(self):
        entities = EntityExtractor().extract("see https://example.com/2 in 5 minutes")
        kinds = [(e.kind, e.value) for e in entities]
        assert ("url", "https://example.com/2") in kinds
        assert ("number", "5") in kinds
        assert ("number", "2") not in kinds

    def test_empty_text(self):
        assert EntityExtractor().extract("") == []

    def test_vocabulary_terms(self):
        extractor = EntityExtractor({"Python"})
        assert extractor.get_vocabulary_size() == 1
        entities = extractor.extract("I like python and PYTHON")
        assert [e.value for e in entities if e.kind == "vocabulary"] == ["python", "PYTHON"]

    def test_blank_vocabulary_term_ignored(self):
        extractor = EntityExtractor({"   ", "rust"})
        assert extractor.get_vocabulary_size() == 1

    def test_round_trip_dict(self):
        entity = Entity("number", "42", 3)
        assert Entity.from_dict(entity.to_dict()) == entity
        assert Entity.from_dict({"kind": "number", "value": "1"}).position is None
