"""
Dependency Injection Container for learnbot.

Builds the chatbot and its collaborators from Settings. This is the
only place Settings is read; every component below it takes explicit
arguments.
"""

from typing import List, Optional

from learnbot.adapters.base import LogicAdapter
from learnbot.adapters.best_match import BestMatchAdapter
from learnbot.adapters.selection import get_selection_strategy
from learnbot.adapters.time_adapter import TimeLogicAdapter
from learnbot.config.settings import Settings, get_settings
from learnbot.conversation.chatbot import ChatBot
from learnbot.conversation.entity import EntityExtractor
from learnbot.conversation.intent import IntentClassifier, KeywordIntentClassifier
from learnbot.core.codebook import Codebook
from learnbot.core.vector_space import VectorSpace
from learnbot.persistence.json_storage import JsonFileStorage
from learnbot.protocols.intent import IntentClassifierProtocol
from learnbot.protocols.storage import StatementStorage


class LearnbotContainer:
    """
    Dependency injection container for the learnbot system.

    Shares one VectorSpace/Codebook and one EntityExtractor between the
    components that need them.

    Attributes:
        _settings: Settings the components are built from
        _space: Shared VectorSpace configuration
        _codebook: Shared Codebook instance
        _entity_extractor: Shared EntityExtractor

    Example:
        >>> container = LearnbotContainer(get_settings(data_dir="/tmp/bot"))
        >>> bot = container.create_chatbot()
        >>> await bot.initialize()
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings if settings is not None else get_settings()
        self._space = VectorSpace(dimensions=self._settings.dimensions)
        self._codebook = Codebook(self._space)
        self._entity_extractor = EntityExtractor(set(self._settings.entity_vocabulary))

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def vector_space(self) -> VectorSpace:
        """Get the shared VectorSpace instance."""
        return self._space

    @property
    def codebook(self) -> Codebook:
        """Get the shared Codebook instance."""
        return self._codebook

    def create_storage(self) -> StatementStorage:
        """
        Create the JSON-file statement store.

        Returns:
            JsonFileStorage at settings.database_path
        """
        return JsonFileStorage(self._settings.database_path)

    def create_intent_classifier(self) -> IntentClassifierProtocol:
        """
        Create the configured intent classifier.

        Returns:
            IntentClassifier ("hdc") or KeywordIntentClassifier ("keyword")
        """
        if self._settings.classifier == "keyword":
            return KeywordIntentClassifier(entity_extractor=self._entity_extractor)
        return IntentClassifier(
            self._codebook,
            threshold=self._settings.intent_threshold,
            model_dir=self._settings.intent_model_dir,
            entity_extractor=self._entity_extractor,
        )

    def create_logic_adapters(self) -> List[LogicAdapter]:
        """
        Create adapters in priority order.

        Raises:
            ValueError: If match_on or selection names are unknown
        """
        adapters: List[LogicAdapter] = []
        if self._settings.enable_time_adapter:
            adapters.append(TimeLogicAdapter(confidence=self._settings.time_confidence))
        adapters.append(
            BestMatchAdapter(
                match_on=self._settings.match_on,
                select=get_selection_strategy(self._settings.selection),
                known_intent_confidence=self._settings.known_intent_confidence,
                unknown_intent_confidence=self._settings.unknown_intent_confidence,
            )
        )
        return adapters

    def create_chatbot(
        self,
        name: str = "learnbot",
        storage: Optional[StatementStorage] = None,
        intent_classifier: Optional[IntentClassifierProtocol] = None,
    ) -> ChatBot:
        """
        Create a fully wired, uninitialized chatbot.

        Args:
            name: Bot name
            storage: Override the statement store (e.g. InMemoryStorage in tests)
            intent_classifier: Override the intent classifier

        Returns:
            ChatBot; call initialize() before use
        """
        return ChatBot(
            name=name,
            storage=storage if storage is not None else self.create_storage(),
            logic_adapters=self.create_logic_adapters(),
            intent_classifier=(
                intent_classifier
                if intent_classifier is not None
                else self.create_intent_classifier()
            ),
            response_threshold=self._settings.response_threshold,
            classifier_timeout=self._settings.classifier_timeout,
            max_sessions=self._settings.max_sessions,
        )

    def __repr__(self) -> str:
        return (
            f"LearnbotContainer(dimensions={self._space.dimensions}, "
            f"classifier={self._settings.classifier!r}, match_on={self._settings.match_on!r})"
        )
