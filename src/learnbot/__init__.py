"""
learnbot: a learning conversational responder.

Answers free-text input with responses it has seen follow that input
before, learns from every turn, and accepts explicit corrections.

The system includes:
- Statement storage with case-insensitive upsert (in-memory and JSON file)
- Intent classification using hyperdimensional prototype vectors
- Pluggable logic adapters (learned-reply retrieval, time of day)
- A chatbot orchestrator with per-conversation session state
"""

__version__ = "0.1.0"

# Conversation
from learnbot.conversation.chatbot import ChatBot
from learnbot.conversation.entity import Entity, EntityExtractor
from learnbot.conversation.intent import IntentClassifier, IntentResult, KeywordIntentClassifier
from learnbot.conversation.statement import Statement

# Adapters
from learnbot.adapters import AdapterResult, BestMatchAdapter, LogicAdapter, TimeLogicAdapter

# Persistence
from learnbot.persistence.in_memory import InMemoryStorage
from learnbot.persistence.json_storage import JsonFileStorage

# Wiring
from learnbot.config.settings import Settings, get_settings
from learnbot.container import LearnbotContainer

__all__ = [
    # Conversation
    "ChatBot",
    "Statement",
    "Entity",
    "EntityExtractor",
    "IntentClassifier",
    "IntentResult",
    "KeywordIntentClassifier",
    # Adapters
    "LogicAdapter",
    "AdapterResult",
    "BestMatchAdapter",
    "TimeLogicAdapter",
    # Persistence
    "InMemoryStorage",
    "JsonFileStorage",
    # Wiring
    "Settings",
    "get_settings",
    "LearnbotContainer",
]
