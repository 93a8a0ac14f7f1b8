"""
Statement: one utterance or learned fact.

Statements are created in-memory on every turn (input and response) and
persisted only when the chatbot learns from them. Stored statements are
keyed by their lowercased text: storing the same text again merges into
the existing record instead of adding a second one.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from learnbot.config.constants import DEFAULT_CONVERSATION
from learnbot.conversation.entity import Entity

logger = logging.getLogger(__name__)


def normalize_key(text: Any) -> Optional[str]:
    """
    Storage key for a statement text.

    Returns:
        Lowercased text, or None when text is not a non-blank string
    """
    if not isinstance(text, str) or not text.strip():
        return None
    return text.lower()


@dataclass
class Statement:
    """
    A recorded utterance with optional intent/entity annotations.

    Treated as immutable by convention: pipeline stages return modified
    copies (dataclasses.replace) rather than mutating their input.

    Attributes:
        text: Utterance text, the case-insensitive storage key
        in_response_to: Text this statement answers
        conversation: Conversation tag
        intent: Intent label (None = unclassified)
        entities: Extracted entities
        confidence: Set by response selection, never persisted
        timestamp: Creation time
    """

    text: str
    in_response_to: Optional[str] = None
    conversation: str = DEFAULT_CONVERSATION
    intent: Optional[str] = None
    entities: List[Entity] = field(default_factory=list)
    confidence: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def key(self) -> Optional[str]:
        return normalize_key(self.text)

    def same_record(self, other: "Statement") -> bool:
        """True when both statements map to the same stored record."""
        return self.key is not None and self.key == other.key

    def serialize(self) -> Dict[str, Any]:
        """Persisted record shape. Confidence is deliberately left out."""
        return {
            "text": self.text,
            "in_response_to": self.in_response_to,
            "conversation": self.conversation,
            "timestamp": self.timestamp.isoformat(),
            "intent": self.intent,
            "entities": [e.to_dict() for e in self.entities],
        }

    @classmethod
    def deserialize(cls, data: Dict[str, Any]) -> "Statement":
        """
        Build a Statement from a persisted record.

        Raises:
            ValueError: If data is not a record with string text
        """
        if not isinstance(data, dict) or not isinstance(data.get("text"), str):
            raise ValueError(f"Invalid statement record: {data!r}")

        entities = [
            Entity.from_dict(e) for e in data.get("entities") or [] if isinstance(e, dict)
        ]
        return cls(
            text=data["text"],
            in_response_to=_optional_str(data.get("in_response_to")),
            conversation=data.get("conversation") or DEFAULT_CONVERSATION,
            intent=_optional_str(data.get("intent")),
            entities=entities,
            timestamp=_parse_timestamp(data.get("timestamp")),
        )

    def merged_with(self, incoming: "Statement") -> "Statement":
        """
        Merge an incoming statement onto this stored one.

        Incoming fields win, except None fields and an empty entity list,
        which count as "not provided" and never clear stored values.
        """
        return replace(
            self,
            text=incoming.text,
            in_response_to=(
                incoming.in_response_to
                if incoming.in_response_to is not None
                else self.in_response_to
            ),
            conversation=incoming.conversation or self.conversation,
            intent=incoming.intent if incoming.intent is not None else self.intent,
            entities=list(incoming.entities) if incoming.entities else list(self.entities),
            confidence=0.0,
            timestamp=incoming.timestamp,
        )

    def __repr__(self) -> str:
        return (
            f"Statement({self.text!r}, in_response_to={self.in_response_to!r}, "
            f"intent={self.intent!r}, conf={self.confidence:.2f})"
        )


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_timestamp(value: Any) -> datetime:
    """Accept ISO strings and epoch milliseconds; fall back to now."""
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.warning("Unparseable timestamp %r, using current time", value)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000.0)
        except (OverflowError, OSError, ValueError):
            logger.warning("Out-of-range timestamp %r, using current time", value)
    return datetime.now()
