"""Persistence layer for statements and the intent model."""

from learnbot.persistence.serialization import IntentModelSerializer, JsonSerializer
from learnbot.persistence.in_memory import InMemoryStorage
from learnbot.persistence.json_storage import JsonFileStorage

__all__ = [
    "JsonSerializer",
    "IntentModelSerializer",
    "InMemoryStorage",
    "JsonFileStorage",
]
