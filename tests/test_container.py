"""
Integration tests for LearnbotContainer wiring.

Builds real components (JSON storage, HDC classifier) in a temporary
data directory.
"""

import asyncio

from learnbot.adapters.best_match import BestMatchAdapter
from learnbot.adapters.time_adapter import TimeLogicAdapter
from learnbot.config.settings import get_settings
from learnbot.container import LearnbotContainer
from learnbot.conversation.intent import IntentClassifier, KeywordIntentClassifier
from learnbot.persistence.json_storage import JsonFileStorage


def test_default_wiring(settings):
    container = LearnbotContainer(settings)
    assert isinstance(container.create_storage(), JsonFileStorage)
    assert isinstance(container.create_intent_classifier(), IntentClassifier)

    adapters = container.create_logic_adapters()
    assert [type(a) for a in adapters] == [TimeLogicAdapter, BestMatchAdapter]
    assert adapters[1].match_on == "in_response_to"


def test_keyword_classifier_and_no_time_adapter(tmp_path):
    settings = get_settings(
        data_dir=tmp_path, classifier="keyword", enable_time_adapter=False, match_on="intent"
    )
    container = LearnbotContainer(settings)
    assert isinstance(container.create_intent_classifier(), KeywordIntentClassifier)
    adapters = container.create_logic_adapters()
    assert len(adapters) == 1
    assert adapters[0].match_on == "intent"


def test_chatbot_learns_and_persists(settings):
    async def first_session():
        bot = LearnbotContainer(settings).create_chatbot()
        assert await bot.initialize()
        await bot.get_response("Hello")
        await bot.get_response("How are you")
        return await bot.get_response("Hello")

    response = asyncio.run(first_session())
    assert response.text == "how are you"
    assert response.confidence > 0.0
    assert settings.database_path.exists()
    assert (settings.intent_model_dir / "intent_model.pt").exists()

    async def second_session():
        bot = LearnbotContainer(settings).create_chatbot()
        assert await bot.initialize()
        return await bot.get_response("hello")

    assert asyncio.run(second_session()).text == "how are you"


def test_time_question_answered_by_time_adapter(settings):
    async def scenario():
        bot = LearnbotContainer(settings).create_chatbot()
        await bot.initialize()
        return await bot.get_response("what time is it")

    response = asyncio.run(scenario())
    assert response.text.startswith("The current time is ")
    assert response.confidence == 1.0


def test_max_sessions_reaches_chatbot(tmp_path):
    settings = get_settings(data_dir=tmp_path, classifier="keyword", max_sessions=7)
    bot = LearnbotContainer(settings).create_chatbot()
    assert bot.sessions.max_sessions == 7


def test_entity_vocabulary_reaches_classifier(tmp_path):
    settings = get_settings(data_dir=tmp_path, classifier="keyword", entity_vocabulary=["Python"])
    classifier = LearnbotContainer(settings).create_intent_classifier()
    result = asyncio.run(classifier.process("I like python"))
    assert [(e.kind, e.value) for e in result.entities] == [("vocabulary", "python")]
