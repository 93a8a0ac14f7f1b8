"""
Application settings using Pydantic.

This module provides runtime configuration with environment variable support.
"""

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from learnbot.config.constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_DATABASE_FILE,
    DEFAULT_DIMENSIONS,
    DEFAULT_MAX_SESSIONS,
    INTENT_CONFIDENCE_THRESHOLD,
    INTENT_MODEL_NAME,
    KNOWN_INTENT_CONFIDENCE,
    MATCH_ON_TEXT,
    MAX_DIMENSIONS,
    MIN_DIMENSIONS,
    RESPONSE_CONFIDENCE_THRESHOLD,
    SELECTION_RANDOM,
    TIME_ADAPTER_CONFIDENCE,
    UNKNOWN_INTENT_CONFIDENCE,
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Settings can be overridden via environment variables prefixed with LEARNBOT_
    For example: LEARNBOT_MATCH_ON=intent
    """

    model_config = SettingsConfigDict(
        env_prefix="LEARNBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow other env vars without error
    )

    # Persistence
    data_dir: Path = Field(
        default=Path(DEFAULT_DATA_DIR),
        description="Directory for the statement store and intent model",
    )

    database_file: str = Field(
        default=DEFAULT_DATABASE_FILE,
        description="Statement store filename, relative to data_dir",
    )

    model_dir: Optional[Path] = Field(
        default=None,
        description="Intent model directory (defaults to data_dir/intent_model)",
    )

    # Intent classifier
    classifier: Literal["hdc", "keyword"] = Field(
        default="hdc",
        description="Intent classifier implementation",
    )

    dimensions: int = Field(
        default=DEFAULT_DIMENSIONS,
        description="Hypervector dimensionality",
        ge=MIN_DIMENSIONS,
        le=MAX_DIMENSIONS,
    )

    intent_threshold: float = Field(
        default=INTENT_CONFIDENCE_THRESHOLD,
        description="Minimum prototype similarity for a recognized intent",
        ge=0.0,
        le=1.0,
    )

    classifier_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for intent classification (None = no limit)",
        gt=0.0,
    )

    entity_vocabulary: List[str] = Field(
        default_factory=list,
        description="Terms reported as vocabulary entities (JSON list in the environment)",
    )

    # Response selection
    response_threshold: float = Field(
        default=RESPONSE_CONFIDENCE_THRESHOLD,
        description="Candidates must score strictly above this",
        ge=0.0,
        le=1.0,
    )

    match_on: Literal["in_response_to", "intent"] = Field(
        default=MATCH_ON_TEXT,
        description="Best-match retrieval key",
    )

    selection: Literal["random", "first"] = Field(
        default=SELECTION_RANDOM,
        description="Strategy for choosing among equally valid candidates",
    )

    known_intent_confidence: float = Field(
        default=KNOWN_INTENT_CONFIDENCE,
        ge=0.0,
        le=1.0,
    )

    unknown_intent_confidence: float = Field(
        default=UNKNOWN_INTENT_CONFIDENCE,
        ge=0.0,
        le=1.0,
    )

    time_confidence: float = Field(
        default=TIME_ADAPTER_CONFIDENCE,
        ge=0.0,
        le=1.0,
    )

    enable_time_adapter: bool = Field(
        default=True,
        description="Register the time-of-day adapter",
    )

    # Conversations
    max_sessions: int = Field(
        default=DEFAULT_MAX_SESSIONS,
        description="Conversations tracked before idle ones are evicted",
        ge=1,
    )

    # Runtime
    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    def __init__(self, **kwargs):  # type: ignore
        super().__init__(**kwargs)
        # Ensure data dir exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        """Full path of the JSON statement store."""
        return self.data_dir / self.database_file

    @property
    def intent_model_dir(self) -> Path:
        """Directory holding intent_model.pt / intent_model.json."""
        if self.model_dir is not None:
            return self.model_dir
        return self.data_dir / INTENT_MODEL_NAME


def get_settings(**overrides) -> Settings:
    """Build a fresh Settings instance (environment + overrides)."""
    return Settings(**overrides)
