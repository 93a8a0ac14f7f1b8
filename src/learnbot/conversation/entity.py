"""
Entity extraction for user input.

Finds built-in entity kinds (emails, urls, clock times, numbers) with
regular expressions, plus configured vocabulary terms.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from learnbot.core.codebook import tokenize


@dataclass(frozen=True)
class Entity:
    """An entity found in user input."""

    kind: str  # "email" | "url" | "time" | "number" | "vocabulary"
    value: str  # Text as it appeared in input
    position: Optional[int] = None  # Character offset in input

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entity":
        """Build from a persisted record; tolerates missing position."""
        return cls(
            kind=str(data.get("kind", "")),
            value=str(data.get("value", "")),
            position=data.get("position"),
        )

    def __repr__(self) -> str:
        return f"Entity({self.kind}={self.value!r}@{self.position})"


# Order matters: earlier patterns claim their span first, so the digits of
# an email, url or time are not reported again as numbers.
_BUILTIN_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("email", re.compile(r"\b[\w.+-]+@[\w-]+(?:\.[\w-]+)+\b")),
    ("url", re.compile(r"\bhttps?://[^\s]+|\bwww\.[^\s]+")),
    ("time", re.compile(r"\b(?:[01]?\d|2[0-3]):[0-5]\d(?:\s?[ap]\.?m\.?)?", re.IGNORECASE)),
    ("number", re.compile(r"(?<![\w.])-?\d+(?:\.\d+)?(?![\w.])")),
]


class EntityExtractor:
    """
    Extract entities from user input.

    Attributes:
        _vocabulary: Configured vocabulary terms, matched per token

    Example:
        >>> extractor = EntityExtractor()
        >>> extractor.extract("mail me at ann@example.com at 10:30")
        [Entity(email='ann@example.com'@11), Entity(time='10:30'@30)]
    """

    def __init__(self, vocabulary: Optional[Set[str]] = None):
        self._vocabulary: Set[str] = {v.lower().strip() for v in vocabulary or set() if v.strip()}

    def extract(self, text: str) -> List[Entity]:
        """
        Find entities in text, ordered by position.

        Args:
            text: User input text

        Returns:
            List of entities; empty for blank input
        """
        if not text:
            return []

        entities: List[Entity] = []
        claimed: List[Tuple[int, int]] = []

        for kind, pattern in _BUILTIN_PATTERNS:
            for match in pattern.finditer(text):
                start, end = match.span()
                if any(start < c_end and end > c_start for c_start, c_end in claimed):
                    continue
                claimed.append((start, end))
                entities.append(Entity(kind=kind, value=match.group(0), position=start))

        if self._vocabulary:
            lowered = text.lower()
            for token in set(tokenize(text)):
                if token not in self._vocabulary:
                    continue
                for match in re.finditer(rf"\b{re.escape(token)}\b", lowered):
                    entities.append(
                        Entity(
                            kind="vocabulary",
                            value=text[match.start():match.end()],
                            position=match.start(),
                        )
                    )

        entities.sort(key=lambda e: (e.position if e.position is not None else -1, e.kind))
        return entities

    def get_vocabulary_size(self) -> int:
        return len(self._vocabulary)

    def __repr__(self) -> str:
        return f"EntityExtractor(vocab={self.get_vocabulary_size()})"
