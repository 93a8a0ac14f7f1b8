"""
Conversation package: statements, intents and per-conversation state.

Components:
    - Statement: recorded utterance, the unit of storage and learning
    - EntityExtractor: pattern and vocabulary entity recognition
    - IntentClassifier: intent detection via HDC prototype vectors
    - KeywordIntentClassifier: substring keyword intent detection
    - Preprocessors: input normalization pipeline
    - SessionRegistry: previous-turn state per conversation id

The ChatBot orchestrator lives in learnbot.conversation.chatbot.
"""

from learnbot.conversation.entity import Entity, EntityExtractor
from learnbot.conversation.statement import Statement, normalize_key
from learnbot.conversation.intent import (
    IntentClassifier,
    IntentResult,
    KeywordIntentClassifier,
)
from learnbot.conversation.preprocessors import (
    DEFAULT_PREPROCESSORS,
    apply_preprocessors,
    clean_whitespace,
    lowercase,
)
from learnbot.conversation.session import ConversationSession, SessionRegistry

__all__ = [
    # Entity
    "Entity",
    "EntityExtractor",
    # Statement
    "Statement",
    "normalize_key",
    # Intent
    "IntentClassifier",
    "IntentResult",
    "KeywordIntentClassifier",
    # Preprocessing
    "DEFAULT_PREPROCESSORS",
    "apply_preprocessors",
    "clean_whitespace",
    "lowercase",
    # Sessions
    "ConversationSession",
    "SessionRegistry",
]
