"""
StatementStorage Protocol: Abstract interface for statement persistence.

Defines the contract that every statement store must follow, so the
chatbot and logic adapters work the same against the in-memory store
used in tests and the JSON file store used in production.
"""

from typing import List, Optional, Protocol

from learnbot.conversation.statement import Statement


class StatementStorage(Protocol):
    """
    Abstract protocol for statement storage.

    Implementations must:
    1. Hold at most one record per lowercased text
    2. Match find/filter queries case-insensitively
    3. Never raise for empty or invalid query values
    4. Keep filter results in a stable (insertion) order

    All operations are coroutines; callers await every call.
    """

    async def find(self, text: Optional[str]) -> Optional[Statement]:
        """
        Find the single record whose text matches, ignoring case.

        Args:
            text: Text to look up

        Returns:
            The stored Statement, or None if not found or text is invalid

        Example:
            >>> await storage.update(Statement("hello"))
            >>> (await storage.find("Hello")).text
            'hello'
        """
        ...

    async def filter(
        self,
        in_response_to: Optional[str] = None,
        intent: Optional[str] = None,
    ) -> List[Statement]:
        """
        Records whose field(s) match, ignoring case.

        At least one field must be a non-blank string for anything to
        match; when both are given, both must match.

        Returns:
            Matching Statements in insertion order (possibly empty)

        Example:
            >>> await storage.filter(in_response_to="hello")
            [Statement('how are you', in_response_to='hello', ...)]
            >>> await storage.filter(in_response_to=None)
            []
        """
        ...

    async def update(self, statement: Statement) -> Optional[Statement]:
        """
        Upsert by lowercased text.

        Inserts when no record has this text, otherwise merges the
        incoming fields onto the stored record (see Statement.merged_with)
        and persists.

        Returns:
            The resulting stored Statement, or None if the write was
            skipped because the text is missing or blank
        """
        ...

    async def count(self) -> int:
        """Number of stored records."""
        ...
