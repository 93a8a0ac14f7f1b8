"""
IntentClassifierProtocol: boundary of the intent classification capability.

The chatbot only depends on this protocol. Any classifier (the in-repo
hyperdimensional and keyword classifiers, or an external NLU service
wrapper) can be plugged in as long as it provides these members.
"""

from typing import Protocol

from learnbot.conversation.intent import IntentResult


class IntentClassifierProtocol(Protocol):
    """
    Text -> {intent, score, entities}.

    Properties:
    - process() before load() finishes returns the unknown intent rather
      than raising
    - load() is idempotent and trains from scratch when no saved model
      can be used
    """

    @property
    def is_ready(self) -> bool:
        ...

    async def load(self) -> None:
        ...

    async def process(self, text: str) -> IntentResult:
        ...
