"""Tests for pydantic-settings configuration."""

import pytest
from pydantic import ValidationError

from learnbot.config.settings import get_settings


def test_defaults(tmp_path):
    settings = get_settings(data_dir=tmp_path / "bot")
    assert settings.data_dir.is_dir()
    assert settings.database_path == tmp_path / "bot" / "statements.json"
    assert settings.intent_model_dir == tmp_path / "bot" / "intent_model"
    assert settings.classifier == "hdc"
    assert settings.match_on == "in_response_to"
    assert settings.selection == "random"
    assert settings.response_threshold == 0.0
    assert settings.classifier_timeout is None
    assert settings.enable_time_adapter is True


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("LEARNBOT_MATCH_ON", "intent")
    monkeypatch.setenv("LEARNBOT_RESPONSE_THRESHOLD", "0.25")
    monkeypatch.setenv("LEARNBOT_CLASSIFIER", "keyword")
    settings = get_settings(data_dir=tmp_path)
    assert settings.match_on == "intent"
    assert settings.response_threshold == 0.25
    assert settings.classifier == "keyword"


def test_explicit_model_dir(tmp_path):
    settings = get_settings(data_dir=tmp_path, model_dir=tmp_path / "models")
    assert settings.intent_model_dir == tmp_path / "models"


@pytest.mark.parametrize(
    "overrides",
    [
        {"match_on": "vibes"},
        {"selection": "best"},
        {"classifier": "llm"},
        {"dimensions": 10},
        {"response_threshold": 1.5},
        {"classifier_timeout": 0},
    ],
)
def test_invalid_values_raise(tmp_path, overrides):
    with pytest.raises(ValidationError):
        get_settings(data_dir=tmp_path, **overrides)


def test_validation_error_is_value_error():
    assert issubclass(ValidationError, ValueError)
