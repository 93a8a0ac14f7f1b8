"""Unit tests for per-conversation session state."""

import asyncio

import pytest

from learnbot.conversation.session import SessionRegistry
from learnbot.conversation.statement import Statement


def test_get_creates_once():
    registry = SessionRegistry()
    session = registry.get("a")
    assert registry.get("a") is session
    assert "a" in registry
    assert len(registry) == 1


def test_sessions_are_independent():
    registry = SessionRegistry()
    registry.get("a").advance(Statement("hello"))
    assert registry.get("b").previous is None
    assert registry.get("a").previous.text == "hello"
    assert registry.get("a").turns == 1


def test_reset():
    registry = SessionRegistry()
    registry.get("a").advance(Statement("hello"))
    assert registry.reset("a")
    assert not registry.reset("a")
    assert registry.get("a").previous is None


def test_least_recently_used_is_evicted():
    registry = SessionRegistry(max_sessions=2)
    registry.get("a").advance(Statement("hello"))
    registry.get("b")
    registry.get("a")  # touch: "b" is now the oldest
    registry.get("c")
    assert len(registry) == 2
    assert "b" not in registry
    assert registry.get("a").previous.text == "hello"


def test_many_conversations_stay_bounded():
    registry = SessionRegistry(max_sessions=10)
    for i in range(5000):
        registry.get(f"conversation-{i}")
    assert len(registry) == 10
    assert "conversation-4999" in registry
    assert "conversation-0" not in registry


def test_locked_session_is_not_evicted():
    async def scenario():
        registry = SessionRegistry(max_sessions=1)
        busy = registry.get("busy")
        async with busy.lock:
            registry.get("other")
            during = ("busy" in registry, len(registry))
        registry.get("third")
        return during, "busy" in registry, len(registry)

    during, busy_after, size_after = asyncio.run(scenario())
    assert during == (True, 2)
    assert not busy_after
    assert size_after == 1


def test_max_sessions_must_be_positive():
    with pytest.raises(ValueError):
        SessionRegistry(max_sessions=0)
