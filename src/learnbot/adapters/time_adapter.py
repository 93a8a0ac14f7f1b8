"""
time_adapter.py

Computed adapter: answers "what time is it" from the clock.
"""

from datetime import datetime
from typing import Callable, Optional

from learnbot.adapters.base import AdapterResult, LogicAdapter
from learnbot.config.constants import INFORM_TIME_INTENT, TIME_ADAPTER_CONFIDENCE, TIME_INTENT
from learnbot.conversation.statement import Statement
from learnbot.protocols.storage import StatementStorage


def format_time(moment: datetime) -> str:
    """12-hour clock with zero-padded hour, e.g. '09:05 PM'."""
    return moment.strftime("%I:%M %p")


class TimeLogicAdapter(LogicAdapter):
    """
    Responds to the time intent with the current time.

    Ignores storage entirely. Its fixed confidence (1.0 by default) beats
    any retrieval adapter, so time questions are always answered here.

    Attributes:
        intent: The only intent this adapter handles
        confidence: Confidence reported with every answer
        clock: Callable returning the current datetime
    """

    def __init__(
        self,
        confidence: float = TIME_ADAPTER_CONFIDENCE,
        clock: Callable[[], datetime] = datetime.now,
        intent: str = TIME_INTENT,
        name: Optional[str] = None,
    ):
        super().__init__(name=name)
        self.confidence = confidence
        self.clock = clock
        self.intent = intent

    def can_process(self, statement: Statement) -> bool:
        return statement.intent == self.intent

    async def process(self, statement: Statement, storage: StatementStorage) -> AdapterResult:
        response = Statement(
            text=f"The current time is {format_time(self.clock())}.",
            in_response_to=statement.text,
            conversation=statement.conversation,
            intent=INFORM_TIME_INTENT,
            confidence=self.confidence,
        )
        return AdapterResult(response=response, confidence=self.confidence)
