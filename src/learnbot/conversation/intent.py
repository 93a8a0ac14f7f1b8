"""
Intent classification using HDC example-based learning.

Classifies user input into intent labels by comparing against prototype
vectors. Each prototype is the superposition of the encoded example
phrases for that intent, so teaching a new phrase is just adding one
more vector to the prototype.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import torch

from learnbot.config.constants import (
    INTENT_CONFIDENCE_THRESHOLD,
    INTENT_MODEL_NAME,
    UNKNOWN_INTENT,
)
from learnbot.conversation.entity import Entity, EntityExtractor
from learnbot.core.codebook import Codebook
from learnbot.core.operations import Operations
from learnbot.persistence.serialization import IntentModelSerializer

logger = logging.getLogger(__name__)


@dataclass
class IntentResult:
    """Result of intent classification."""

    intent: str
    score: float
    entities: List[Entity] = field(default_factory=list)

    @classmethod
    def unknown(cls) -> "IntentResult":
        return cls(intent=UNKNOWN_INTENT, score=0.0, entities=[])

    def __repr__(self) -> str:
        return f"IntentResult({self.intent}, score={self.score:.2f}, entities={len(self.entities)})"


# Training documents used when no saved model exists.
SEED_EXAMPLES: Dict[str, List[str]] = {
    "greeting": [
        "hello",
        "hi",
        "hey there",
        "good morning",
        "good afternoon",
        "howdy",
        "greetings",
    ],
    "goodbye": [
        "bye",
        "goodbye",
        "see you later",
        "take care",
        "farewell",
    ],
    "ask_status": [
        "how are you",
        "how is it going",
        "are you okay",
        "how are you doing",
    ],
    "ask_time": [
        "what time is it",
        "current time",
        "tell me the time",
        "what is the time now",
    ],
    "affirmative": [
        "yes",
        "yeah",
        "okay",
        "sure",
        "sounds good",
    ],
    "negative": [
        "no",
        "nope",
        "nah",
        "not really",
    ],
}

# Substring keyword map for KeywordIntentClassifier. First hit wins.
KEYWORD_INTENTS: Dict[str, List[str]] = {
    "greeting": ["hello", "hi", "hey", "greetings", "good morning", "good afternoon", "sup"],
    "goodbye": ["bye", "goodbye", "see you", "later", "farewell", "take care"],
    "ask_status": ["how are you", "how is it going", "how goes it", "status", "how you doing"],
    "affirmative": ["yes", "yeah", "yep", "ok", "okay", "sure", "sounds good"],
    "negative": ["no", "nope", "nah", "not really"],
    "ask_time": ["what time is it", "current time", "time now", "tell me the time"],
}


class IntentClassifier:
    """
    HDC-based intent classification using example learning.

    Prototypes are kept as unnormalized sums of unit phrase vectors, so
    every example contributes equally no matter when it was learned.
    Classification compares the input's phrase vector with each
    prototype by cosine similarity.

    Attributes:
        _codebook: Token hypervectors
        _prototypes: Per-intent accumulated example vectors
        _example_counts: Number of examples per intent
        _threshold: Minimum similarity for a recognized intent
        _model_dir: Where load()/save() keep the model (None = memory only)

    Example:
        >>> classifier = IntentClassifier(Codebook(VectorSpace(1000)))
        >>> await classifier.load()
        >>> (await classifier.process("hello there")).intent
        'greeting'
        >>> classifier.learn("yo", "greeting")
    """

    def __init__(
        self,
        codebook: Codebook,
        threshold: float = INTENT_CONFIDENCE_THRESHOLD,
        model_dir: Optional[Path] = None,
        examples: Optional[Mapping[str, Sequence[str]]] = None,
        entity_extractor: Optional[EntityExtractor] = None,
    ):
        """
        Initialize an untrained classifier.

        Args:
            codebook: Shared Codebook instance
            threshold: Minimum similarity for classification
            model_dir: Directory for the saved model
            examples: Training documents (default SEED_EXAMPLES)
            entity_extractor: Extractor for result entities
        """
        self._codebook = codebook
        self._threshold = threshold
        self._model_dir = Path(model_dir) if model_dir is not None else None
        self._examples = {k: list(v) for k, v in (examples or SEED_EXAMPLES).items()}
        self._entity_extractor = entity_extractor or EntityExtractor()
        self._prototypes: Dict[str, torch.Tensor] = {}
        self._example_counts: Dict[str, int] = {}
        self._ready = False
        self._load_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def load(self) -> None:
        """
        Load the saved model, or train from the seed examples.

        Idempotent: once ready, further calls return immediately.
        Concurrent callers wait for the first load instead of repeating it.
        """
        async with self._load_lock:
            if self._ready:
                return

            if self._model_dir is not None:
                try:
                    prototypes, metadata = await asyncio.to_thread(
                        IntentModelSerializer.load,
                        self._model_dir,
                        INTENT_MODEL_NAME,
                        self._codebook.space.dimensions,
                    )
                    self._prototypes = prototypes
                    self._example_counts = dict(metadata.get("example_counts", {}))
                    self._ready = True
                    logger.info("Loaded intent model from %s", self._model_dir)
                    return
                except FileNotFoundError:
                    logger.info("No intent model in %s, training from scratch", self._model_dir)
                except (ValueError, RuntimeError, OSError) as exc:
                    logger.warning("Failed to load intent model (%s), training from scratch", exc)

            await self.train()

    async def train(self) -> None:
        """Rebuild all prototypes from the training examples and save them."""
        self._prototypes = {}
        self._example_counts = {}
        for intent, phrases in self._examples.items():
            for phrase in phrases:
                self.learn(phrase, intent)
        self._ready = True
        logger.info(
            "Trained intent model: %d intents, %d examples",
            len(self._prototypes),
            sum(self._example_counts.values()),
        )
        try:
            await self.save()
        except (OSError, RuntimeError) as exc:
            # Prototypes stay usable in memory; the next start retrains.
            logger.warning("Failed to save intent model to %s: %s", self._model_dir, exc)

    async def save(self) -> None:
        """Persist prototypes when a model directory is configured."""
        if self._model_dir is None:
            return
        metadata = {
            "dimensions": self._codebook.space.dimensions,
            "example_counts": dict(self._example_counts),
        }
        await asyncio.to_thread(
            IntentModelSerializer.save,
            self._prototypes,
            metadata,
            self._model_dir,
            INTENT_MODEL_NAME,
        )

    def learn(self, text: str, intent: str) -> bool:
        """
        Teach the classifier one example phrase.

        Args:
            text: Example phrase
            intent: Intent label (UNKNOWN_INTENT is never learned)

        Returns:
            True if the example was added
        """
        if not intent or intent == UNKNOWN_INTENT:
            return False
        vec = self._codebook.encode_text(text)
        if vec is None:
            return False

        if intent in self._prototypes:
            self._prototypes[intent] = Operations.bundle(
                self._prototypes[intent], vec, normalize=False
            )
        else:
            self._prototypes[intent] = vec.clone()
        self._example_counts[intent] = self._example_counts.get(intent, 0) + 1
        return True

    def classify(self, text: str) -> IntentResult:
        """
        Synchronous classification.

        Returns:
            IntentResult; UNKNOWN_INTENT when untrained, for empty input,
            or when the best score is below the threshold
        """
        entities = self._entity_extractor.extract(text)
        vec = self._codebook.encode_text(text)
        if vec is None or not self._prototypes:
            return IntentResult(intent=UNKNOWN_INTENT, score=0.0, entities=entities)

        intents = list(self._prototypes)
        scores = Operations.cosine_batch(vec, [self._prototypes[i] for i in intents])
        best_index = max(range(len(intents)), key=lambda i: scores[i])
        best_score = max(0.0, min(1.0, scores[best_index]))

        if best_score < self._threshold:
            return IntentResult(intent=UNKNOWN_INTENT, score=best_score, entities=entities)
        return IntentResult(intent=intents[best_index], score=best_score, entities=entities)

    async def process(self, text: str) -> IntentResult:
        """
        Classify text.

        Returns the unknown result when the model is not loaded yet.
        """
        if not self._ready:
            logger.warning("Intent classifier not ready, returning default intent")
            return IntentResult.unknown()
        return self.classify(text)

    def get_example_counts(self) -> Dict[str, int]:
        return dict(self._example_counts)

    def __repr__(self) -> str:
        total = sum(self._example_counts.values())
        return f"IntentClassifier(examples={total}, threshold={self._threshold}, ready={self._ready})"


class KeywordIntentClassifier:
    """
    Substring keyword classifier.

    Deterministic and always ready; the first intent with a keyword
    contained in the text wins (score 1.0), otherwise UNKNOWN_INTENT.
    """

    def __init__(
        self,
        keywords: Optional[Mapping[str, Sequence[str]]] = None,
        entity_extractor: Optional[EntityExtractor] = None,
    ):
        self._keywords = {k: [w.lower() for w in v] for k, v in (keywords or KEYWORD_INTENTS).items()}
        self._entity_extractor = entity_extractor or EntityExtractor()

    @property
    def is_ready(self) -> bool:
        return True

    async def load(self) -> None:
        return None

    def classify(self, text: str) -> IntentResult:
        lowered = text.lower()
        entities = self._entity_extractor.extract(text)
        for intent, keywords in self._keywords.items():
            if any(keyword in lowered for keyword in keywords):
                return IntentResult(intent=intent, score=1.0, entities=entities)
        return IntentResult(intent=UNKNOWN_INTENT, score=0.0, entities=entities)

    async def process(self, text: str) -> IntentResult:
        return self.classify(text)

    def __repr__(self) -> str:
        return f"KeywordIntentClassifier(intents={len(self._keywords)})"
