"""
best_match.py

Retrieval adapter: answers with a learned statement.

Two retrieval keys are supported and are mutually exclusive per adapter:
- "in_response_to": statements previously seen in response to this exact text
- "intent": statements learned as appropriate for the input's intent
"""

import logging
from typing import List, Optional

from learnbot.adapters.base import AdapterResult, LogicAdapter
from learnbot.adapters.selection import SelectionStrategy, select_random
from learnbot.config.constants import (
    KNOWN_INTENT_CONFIDENCE,
    MATCH_ON_CHOICES,
    MATCH_ON_INTENT,
    MATCH_ON_TEXT,
    UNKNOWN_INTENT,
    UNKNOWN_INTENT_CONFIDENCE,
)
from learnbot.conversation.statement import Statement
from learnbot.protocols.storage import StatementStorage

logger = logging.getLogger(__name__)


class BestMatchAdapter(LogicAdapter):
    """
    Pick a stored response for the input.

    Confidence is fixed: known_intent_confidence when the input's intent
    was recognized, unknown_intent_confidence when it is the "unknown"
    sentinel. It does not depend on how many candidates matched or how
    similar they are.

    Attributes:
        match_on: Retrieval key ("in_response_to" or "intent")
        select: Strategy choosing among candidates
        known_intent_confidence: Confidence for recognized intents
        unknown_intent_confidence: Confidence for the unknown intent

    Example:
        >>> adapter = BestMatchAdapter(select=select_first)
        >>> result = await adapter.process(Statement("hello", intent="greeting"), storage)
        >>> result.confidence
        0.9
    """

    def __init__(
        self,
        match_on: str = MATCH_ON_TEXT,
        select: SelectionStrategy = select_random,
        known_intent_confidence: float = KNOWN_INTENT_CONFIDENCE,
        unknown_intent_confidence: float = UNKNOWN_INTENT_CONFIDENCE,
        name: Optional[str] = None,
    ):
        super().__init__(name=name)
        if match_on not in MATCH_ON_CHOICES:
            raise ValueError(f"match_on must be one of {MATCH_ON_CHOICES}, got {match_on!r}")
        self.match_on = match_on
        self.select = select
        self.known_intent_confidence = known_intent_confidence
        self.unknown_intent_confidence = unknown_intent_confidence

    async def process(self, statement: Statement, storage: StatementStorage) -> AdapterResult:
        if self.match_on == MATCH_ON_INTENT and not statement.intent:
            logger.warning("%s: input statement has no intent classified", self.name)
            return AdapterResult.no_match()

        try:
            candidates = await self._candidates(statement, storage)
        except Exception:
            logger.exception("%s: error filtering storage", self.name)
            return AdapterResult.no_match()

        if not candidates:
            return AdapterResult.no_match()

        confidence = (
            self.unknown_intent_confidence
            if statement.intent == UNKNOWN_INTENT
            else self.known_intent_confidence
        )
        selected = self.select(candidates)
        logger.debug(
            "%s: %d candidates for %r, selected %r",
            self.name,
            len(candidates),
            statement.text,
            selected.text,
        )
        return AdapterResult(response=selected, confidence=confidence)

    async def _candidates(self, statement: Statement, storage: StatementStorage) -> List[Statement]:
        if self.match_on == MATCH_ON_INTENT:
            found = await storage.filter(intent=statement.intent)
        else:
            found = await storage.filter(in_response_to=statement.text)
        return [s for s in found if isinstance(s.text, str) and s.text]
