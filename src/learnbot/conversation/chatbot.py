"""
Main chatbot orchestrating storage, intent classification and logic adapters.

One turn:
1. Coerce and preprocess the input
2. Classify its intent
3. Learn that it followed the conversation's previous input
4. Ask every logic adapter for a candidate and keep the most confident
5. Learn the chosen response (unless it is the fallback)
"""

import asyncio
import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from learnbot.adapters.base import AdapterResult, LogicAdapter
from learnbot.adapters.best_match import BestMatchAdapter
from learnbot.config.constants import (
    DEFAULT_CONVERSATION,
    DEFAULT_MAX_SESSIONS,
    DEFAULT_RESPONSE_INTENT,
    DEFAULT_RESPONSE_TEMPLATE,
    EMPTY_INPUT_TEXT,
    RESPONSE_CONFIDENCE_THRESHOLD,
    STARTING_UP_TEXT,
)
from learnbot.conversation.intent import IntentResult
from learnbot.conversation.preprocessors import (
    DEFAULT_PREPROCESSORS,
    Preprocessor,
    apply_preprocessors,
)
from learnbot.conversation.session import ConversationSession, SessionRegistry
from learnbot.conversation.statement import Statement
from learnbot.persistence.in_memory import InMemoryStorage
from learnbot.protocols.intent import IntentClassifierProtocol
from learnbot.protocols.storage import StatementStorage

logger = logging.getLogger(__name__)


class ChatBot:
    """
    Learning conversational responder.

    The bot starts uninitialized and answers every input with a fixed
    "starting up" statement until initialize() succeeds. Once ready, it
    never raises out of get_response(): every failure degrades to a
    lower-confidence answer instead.

    Attributes:
        name: Bot name (used in logs)
        _storage: Statement store
        _logic_adapters: Adapters consulted in order
        _preprocessors: Input pipeline, applied left to right
        _intent_classifier: Optional intent capability
        _response_threshold: Candidates must score strictly above this
        _classifier_timeout: Seconds to wait for classification (None = no limit)
        _sessions: Per-conversation previous-turn state, capped LRU

    Example:
        >>> bot = ChatBot(storage=InMemoryStorage(), intent_classifier=KeywordIntentClassifier())
        >>> await bot.initialize()
        >>> (await bot.get_response("Hello")).text
        "I'm not sure how to respond to 'hello'."
    """

    def __init__(
        self,
        name: str = "learnbot",
        storage: Optional[StatementStorage] = None,
        logic_adapters: Optional[Sequence[LogicAdapter]] = None,
        preprocessors: Optional[Sequence[Preprocessor]] = None,
        intent_classifier: Optional[IntentClassifierProtocol] = None,
        response_threshold: float = RESPONSE_CONFIDENCE_THRESHOLD,
        classifier_timeout: Optional[float] = None,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        """
        Initialize the chatbot.

        Args:
            name: Bot name
            storage: Statement store (default: a fresh InMemoryStorage)
            logic_adapters: Adapters in priority order (default: [BestMatchAdapter()])
            preprocessors: Input pipeline (default: clean_whitespace, lowercase)
            intent_classifier: Intent capability; None treats every input as unknown
            response_threshold: Minimum confidence, exclusive
            classifier_timeout: Seconds before classification falls back to unknown
            max_sessions: Conversations tracked before idle ones are evicted
        """
        self.name = name
        self._storage = storage if storage is not None else InMemoryStorage()
        self._logic_adapters: List[LogicAdapter] = list(
            logic_adapters if logic_adapters is not None else [BestMatchAdapter()]
        )
        self._preprocessors: List[Preprocessor] = list(
            preprocessors if preprocessors is not None else DEFAULT_PREPROCESSORS
        )
        self._intent_classifier = intent_classifier
        self._response_threshold = response_threshold
        self._classifier_timeout = classifier_timeout
        self._sessions = SessionRegistry(max_sessions)
        self._ready = False
        self._init_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def storage(self) -> StatementStorage:
        return self._storage

    @property
    def sessions(self) -> SessionRegistry:
        return self._sessions

    async def initialize(self) -> bool:
        """
        Bootstrap the bot (load or train the intent classifier).

        Idempotent. On failure the error is logged and the bot stays
        uninitialized; nothing retries automatically.

        Returns:
            True if the bot is ready
        """
        async with self._init_lock:
            if self._ready:
                return True

            if self._intent_classifier is not None:
                try:
                    await self._intent_classifier.load()
                except Exception:
                    logger.exception("%s: failed to initialize intent classifier", self.name)
                    return False

            self._ready = True
            logger.info(
                "%s ready (adapters=%s, threshold=%.2f)",
                self.name,
                [a.name for a in self._logic_adapters],
                self._response_threshold,
            )
            return True

    async def get_response(
        self,
        input_statement: Any,
        conversation: str = DEFAULT_CONVERSATION,
    ) -> Statement:
        """
        Respond to one input and learn from it.

        Args:
            input_statement: Raw text or a Statement
            conversation: Conversation id selecting the session

        Returns:
            Response Statement with its confidence set
        """
        if not self._ready:
            return Statement(text=STARTING_UP_TEXT, conversation=conversation, confidence=0.0)

        session = self._sessions.get(conversation)
        async with session.lock:
            try:
                return await self._respond(input_statement, session)
            except Exception:
                logger.exception("%s: unexpected error while responding", self.name)
                text = getattr(input_statement, "text", input_statement)
                return self._default_response(
                    Statement(text=text if isinstance(text, str) else "", conversation=conversation)
                )

    async def learn_correction(
        self,
        original_text: Any,
        correct_text: Any,
        conversation: str = DEFAULT_CONVERSATION,
    ) -> Optional[Statement]:
        """
        Teach that correct_text is the right reply to original_text.

        The correction is stored unconditionally. Whatever wrong reply was
        given before is left as it is; it just stops being the only
        candidate for this input.

        Returns:
            The stored record, or None if the write was skipped
        """
        original = apply_preprocessors(self._coerce(original_text, conversation), self._preprocessors)
        correct = apply_preprocessors(self._coerce(correct_text, conversation), self._preprocessors)

        intent = (await self._classify(original.text)).intent if original.text else None
        stored = await self._safe_update(
            Statement(
                text=correct.text,
                in_response_to=original.text or None,
                conversation=conversation,
                intent=intent,
            )
        )
        if stored is not None:
            logger.info("Learned correction: %r -> %r", original.text, stored.text)
        return stored

    async def get_stats(self) -> Dict[str, Any]:
        """Summary used by the REPL /stats command and the web app."""
        try:
            statements = await self._storage.count()
        except Exception:
            logger.exception("%s: failed to count statements", self.name)
            statements = -1
        return {
            "name": self.name,
            "ready": self._ready,
            "statements": statements,
            "conversations": len(self._sessions),
            "adapters": [a.name for a in self._logic_adapters],
            "classifier": repr(self._intent_classifier),
        }

    async def _respond(self, input_statement: Any, session: ConversationSession) -> Statement:
        current = self._coerce(input_statement, session.conversation_id)
        current = apply_preprocessors(current, self._preprocessors)
        if not current.text:
            return Statement(
                text=EMPTY_INPUT_TEXT,
                conversation=session.conversation_id,
                confidence=0.0,
            )

        result = await self._classify(current.text)
        current = replace(current, intent=result.intent, entities=list(result.entities))
        logger.debug("%s: input %r classified as %r", self.name, current.text, result)

        if session.previous is not None:
            await self._learn_input_sequence(current, session.previous)

        best = await self._best_result(current)
        if best is not None and best.confidence > self._response_threshold:
            response = replace(
                best.response,
                in_response_to=current.text,
                conversation=current.conversation,
                confidence=best.confidence,
                timestamp=datetime.now(),
            )
            await self._learn_response_to_intent(response, current)
        else:
            response = self._default_response(current)

        session.advance(current)
        return response

    def _coerce(self, value: Any, conversation: str) -> Statement:
        """Turn raw text or a Statement into a detached Statement with string text."""
        if isinstance(value, Statement):
            statement = replace(value, conversation=conversation, entities=list(value.entities))
        else:
            statement = Statement(text=value, conversation=conversation)
        if not isinstance(statement.text, str):
            logger.warning("Non-string input %r treated as empty text", statement.text)
            statement = replace(statement, text="")
        return statement

    async def _classify(self, text: str) -> IntentResult:
        if self._intent_classifier is None:
            return IntentResult.unknown()
        try:
            if self._classifier_timeout is not None:
                result = await asyncio.wait_for(
                    self._intent_classifier.process(text), self._classifier_timeout
                )
            else:
                result = await self._intent_classifier.process(text)
        except asyncio.TimeoutError:
            logger.warning(
                "%s: intent classification timed out after %ss", self.name, self._classifier_timeout
            )
            return IntentResult.unknown()
        except Exception:
            logger.exception("%s: intent classification failed", self.name)
            return IntentResult.unknown()

        if not isinstance(result, IntentResult):
            logger.warning("%s: classifier returned %r, using unknown intent", self.name, result)
            return IntentResult.unknown()
        return result

    async def _best_result(self, current: Statement) -> Optional[AdapterResult]:
        best: Optional[AdapterResult] = None
        for adapter in self._logic_adapters:
            try:
                if not adapter.can_process(current):
                    continue
                result = await adapter.process(current, self._storage)
            except Exception:
                logger.exception("%s: adapter %s failed, skipping", self.name, adapter.name)
                continue

            if not _is_valid_result(result):
                logger.warning(
                    "%s: adapter %s returned invalid result %r, ignoring",
                    self.name,
                    adapter.name,
                    result,
                )
                continue
            if result.response is None:
                continue
            # Strict comparison: ties keep the earliest adapter.
            if best is None or result.confidence > best.confidence:
                best = result
        return best

    def _default_response(self, current: Statement) -> Statement:
        return Statement(
            text=DEFAULT_RESPONSE_TEMPLATE.format(text=current.text),
            in_response_to=current.text,
            conversation=current.conversation,
            intent=DEFAULT_RESPONSE_INTENT,
            confidence=0.0,
        )

    async def _learn_input_sequence(self, current: Statement, previous: Statement) -> None:
        """Remember that current was said in response to the previous input."""
        stored = await self._safe_update(
            Statement(
                text=current.text,
                in_response_to=previous.text,
                conversation=current.conversation,
                intent=current.intent,
                entities=list(current.entities),
            )
        )
        if stored is not None:
            logger.info("Learned %r in response to %r", stored.text, stored.in_response_to)

    async def _learn_response_to_intent(self, response: Statement, current: Statement) -> None:
        """Remember the chosen response, tagged with the input's intent."""
        await self._safe_update(
            Statement(
                text=response.text,
                in_response_to=response.in_response_to,
                conversation=current.conversation,
                intent=current.intent,
            )
        )

    async def _safe_update(self, statement: Statement) -> Optional[Statement]:
        try:
            return await self._storage.update(statement)
        except Exception:
            logger.exception("%s: failed to store %r", self.name, statement)
            return None

    def __repr__(self) -> str:
        return (
            f"ChatBot({self.name!r}, ready={self._ready}, "
            f"adapters={len(self._logic_adapters)}, sessions={len(self._sessions)})"
        )


def _is_valid_result(result: Any) -> bool:
    if not isinstance(result, AdapterResult):
        return False
    if result.response is not None and not isinstance(result.response, Statement):
        return False
    confidence = result.confidence
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        return False
    return not math.isnan(confidence) and 0.0 <= confidence <= 1.0
