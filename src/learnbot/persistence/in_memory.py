"""
InMemoryStorage: dict-backed implementation of the StatementStorage protocol.

Holds all matching and upsert logic. JsonFileStorage builds on it and
only adds loading and snapshot writes.

Useful on its own for:
- Unit testing the chatbot and adapters without disk I/O
- Short-lived sessions that don't need to remember anything
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from learnbot.conversation.statement import Statement, normalize_key

logger = logging.getLogger(__name__)


def _detached(statement: Statement) -> Statement:
    """Copy handed to callers so they can never mutate a stored record."""
    return replace(statement, entities=list(statement.entities))


def _query_key(value: object) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.lower()


class InMemoryStorage:
    """
    In-memory statement store.

    Attributes:
        _records: Lowercased text -> stored Statement, in insertion order

    Example:
        >>> storage = InMemoryStorage()
        >>> await storage.update(Statement("How are you", in_response_to="hello"))
        >>> await storage.filter(in_response_to="HELLO")
        [Statement('How are you', in_response_to='hello', ...)]
    """

    def __init__(self, statements: Optional[List[Statement]] = None):
        self._records: Dict[str, Statement] = {}
        for statement in statements or []:
            self._upsert(statement)

    async def _records_view(self) -> Dict[str, Statement]:
        """Hook for subclasses that must load before reading."""
        return self._records

    async def find(self, text: Optional[str]) -> Optional[Statement]:
        key = _query_key(text)
        if key is None:
            return None
        records = await self._records_view()
        stored = records.get(key)
        return _detached(stored) if stored is not None else None

    async def filter(
        self,
        in_response_to: Optional[str] = None,
        intent: Optional[str] = None,
    ) -> List[Statement]:
        response_key = _query_key(in_response_to)
        intent_key = _query_key(intent)
        if response_key is None and intent_key is None:
            return []
        # A supplied-but-invalid value must not widen the match.
        if (in_response_to is not None and response_key is None) or (
            intent is not None and intent_key is None
        ):
            return []

        records = await self._records_view()
        results = []
        for statement in records.values():
            if response_key is not None and _query_key(statement.in_response_to) != response_key:
                continue
            if intent_key is not None and _query_key(statement.intent) != intent_key:
                continue
            results.append(_detached(statement))
        return results

    async def update(self, statement: Statement) -> Optional[Statement]:
        await self._records_view()
        stored = self._upsert(statement)
        return _detached(stored) if stored is not None else None

    async def count(self) -> int:
        records = await self._records_view()
        return len(records)

    def _upsert(self, statement: Statement) -> Optional[Statement]:
        key = normalize_key(statement.text)
        if key is None:
            logger.warning("Skipping update: statement text is invalid: %r", statement.text)
            return None

        existing = self._records.get(key)
        if existing is None:
            stored = Statement.deserialize(statement.serialize())
        else:
            stored = existing.merged_with(statement)
        self._records[key] = stored
        return stored

    def __repr__(self) -> str:
        return f"{type(self).__name__}(statements={len(self._records)})"
