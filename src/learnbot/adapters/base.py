"""
base.py

Abstract base class that all logic adapters must implement.
A logic adapter looks at a preprocessed, intent-classified input
statement and proposes one candidate response with a confidence.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from learnbot.conversation.statement import Statement
from learnbot.protocols.storage import StatementStorage


@dataclass
class AdapterResult:
    """A candidate response and the adapter's confidence in it."""

    response: Optional[Statement]
    confidence: float

    @classmethod
    def no_match(cls) -> "AdapterResult":
        return cls(response=None, confidence=0.0)

    def __repr__(self) -> str:
        text = self.response.text if self.response is not None else None
        return f"AdapterResult({text!r}, conf={self.confidence:.2f})"


class LogicAdapter(ABC):
    """
    Abstract base class for all logic adapters.

    Adapters can be storage-backed (retrieve a learned reply) or fully
    computed (synthesize a reply). The chatbot treats both the same:
    it calls process() only when can_process() returned True, and an
    adapter that raises is treated as having abstained for that turn.

    Example:
        class EchoAdapter(LogicAdapter):
            async def process(self, statement, storage):
                return AdapterResult(Statement(statement.text), 0.1)
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or type(self).__name__

    def can_process(self, statement: Statement) -> bool:
        """
        Cheap precondition check.

        The default accepts any statement with non-empty string text.
        """
        return isinstance(statement.text, str) and len(statement.text) > 0

    @abstractmethod
    async def process(self, statement: Statement, storage: StatementStorage) -> AdapterResult:
        """
        Propose a response for the statement.

        Ordinary no-match cases return AdapterResult.no_match() instead
        of raising.

        Args:
            statement: Preprocessed input with intent attached
            storage: Statement store to query (may be ignored)

        Returns:
            AdapterResult with the candidate response (or None) and confidence
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
