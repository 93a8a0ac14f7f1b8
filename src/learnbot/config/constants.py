"""
Learnbot constants.

Defaults for the response pipeline, the intent classifier and persistence.
Runtime overrides live in learnbot.config.settings.
"""

# Vector Space Configuration
DEFAULT_DIMENSIONS = 10000
"""Hypervector dimensionality for the intent classifier. 10,000D keeps
unrelated token vectors close to orthogonal (cosine noise ~0.01)."""

MIN_DIMENSIONS = 100
MAX_DIMENSIONS = 100000

# Intent Classification
UNKNOWN_INTENT = "unknown"
"""Sentinel intent returned when no prototype is similar enough."""

INTENT_CONFIDENCE_THRESHOLD = 0.20
"""Minimum cosine similarity between an input and an intent prototype.
A single-token input scores ~0.4 against a prototype of five examples,
unrelated prototypes stay near 0."""

TIME_INTENT = "ask_time"
INFORM_TIME_INTENT = "inform_time"
DEFAULT_RESPONSE_INTENT = "default_response"

# Response Selection
RESPONSE_CONFIDENCE_THRESHOLD = 0.0
"""A candidate is adopted only when its confidence is strictly greater
than this value."""

KNOWN_INTENT_CONFIDENCE = 0.9
"""Fixed best-match confidence when the input intent was recognized."""

UNKNOWN_INTENT_CONFIDENCE = 0.3
"""Fixed best-match confidence when the input intent is UNKNOWN_INTENT."""

TIME_ADAPTER_CONFIDENCE = 1.0

MATCH_ON_TEXT = "in_response_to"
MATCH_ON_INTENT = "intent"
MATCH_ON_CHOICES = (MATCH_ON_TEXT, MATCH_ON_INTENT)

SELECTION_RANDOM = "random"
SELECTION_FIRST = "first"

# Conversation
DEFAULT_CONVERSATION = "default"

DEFAULT_MAX_SESSIONS = 1000
"""Conversations kept in memory before the least recently used idle one
is forgotten."""

STARTING_UP_TEXT = "I'm still starting up. Please try again in a moment."
EMPTY_INPUT_TEXT = "Please say something so I can respond."
DEFAULT_RESPONSE_TEMPLATE = "I'm not sure how to respond to '{text}'."

# File Persistence
DEFAULT_DATA_DIR = "./data/learnbot"
DEFAULT_DATABASE_FILE = "statements.json"
INTENT_MODEL_NAME = "intent_model"
