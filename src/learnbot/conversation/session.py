"""
Per-conversation session state.

Each conversation id gets its own session holding the previous input
statement, which the chatbot uses to learn "X follows Y" associations.
A session's lock makes one turn of a conversation finish before the
next turn of the same conversation starts.
"""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from learnbot.config.constants import DEFAULT_MAX_SESSIONS
from learnbot.conversation.statement import Statement

logger = logging.getLogger(__name__)


@dataclass
class ConversationSession:
    """State for one conversation."""

    conversation_id: str
    previous: Optional[Statement] = None
    turns: int = 0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def advance(self, statement: Statement) -> None:
        self.previous = statement
        self.turns += 1

    def __repr__(self) -> str:
        prev = self.previous.text if self.previous is not None else None
        return f"ConversationSession({self.conversation_id!r}, previous={prev!r}, turns={self.turns})"


class SessionRegistry:
    """
    Conversation id -> ConversationSession, least recently used first.

    Sessions are created on first use. Once more than max_sessions exist,
    the least recently used sessions whose lock is free are forgotten, so
    an evicted conversation simply starts over without a previous turn.
    Sessions in the middle of a turn are never evicted, which can leave
    the registry above its cap while many turns run at once.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be >= 1, got {max_sessions}")
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ConversationSession]" = OrderedDict()

    def get(self, conversation_id: str) -> ConversationSession:
        session = self._sessions.get(conversation_id)
        if session is not None:
            self._sessions.move_to_end(conversation_id)
            return session

        session = ConversationSession(conversation_id)
        self._sessions[conversation_id] = session
        self._evict()
        return session

    def reset(self, conversation_id: str) -> bool:
        """Forget a conversation. Returns True if it existed."""
        return self._sessions.pop(conversation_id, None) is not None

    def _evict(self) -> None:
        excess = len(self._sessions) - self.max_sessions
        if excess <= 0:
            return
        # The newest entry is the session being handed out.
        candidates = list(self._sessions.items())[:-1]
        for conversation_id, session in candidates:
            if excess <= 0:
                break
            if session.lock.locked():
                continue
            self.reset(conversation_id)
            excess -= 1
            logger.debug("Evicted idle conversation %r", conversation_id)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __repr__(self) -> str:
        return f"SessionRegistry(sessions={len(self._sessions)}, max={self.max_sessions})"
