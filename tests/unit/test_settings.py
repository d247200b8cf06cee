"""
Unit tests for configuration models and mode parsing.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from clipclassify.config import DEFAULT_PROMPT_TEMPLATE, AppSettings, ClassifierSettings
from clipclassify.core.errors import ConfigError
from clipclassify.core.models import Mode


class TestMode:
    @pytest.mark.parametrize("raw, expected", [("runtime", Mode.RUNTIME), ("PRECOMPUTED", Mode.PRECOMPUTED)])
    def test_parse(self, raw, expected):
        assert Mode.parse(raw) is expected

    def test_invalid_mode_lists_choices(self):
        with pytest.raises(ConfigError) as info:
            Mode.parse("fast")
        assert str(info.value) == "Invalid mode 'fast'. Valid modes: runtime, precomputed"

    def test_descriptions(self):
        assert "startup" in Mode.RUNTIME.description
        assert "cache" in Mode.PRECOMPUTED.description


class TestDefaults:
    def test_classifier_defaults(self):
        settings = ClassifierSettings()

        assert settings.mode is Mode.RUNTIME
        assert settings.prompt_template == DEFAULT_PROMPT_TEMPLATE == "a photo of a {}"
        assert settings.max_workers == 1
        assert settings.progress_interval == 10

    def test_blank_template_rejected(self):
        with pytest.raises(ValidationError):
            ClassifierSettings(prompt_template="  ")

    def test_log_level_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")


class TestFromEnv:
    def test_empty_environment(self):
        settings = AppSettings.from_env({})

        assert settings == AppSettings()

    def test_overrides(self):
        settings = AppSettings.from_env(
            {
                "CLIPCLASSIFY_MODE": "precomputed",
                "CLIPCLASSIFY_EMBEDDINGS_PATH": "/tmp/cache.json",
                "CLIPCLASSIFY_MAX_WORKERS": "4",
                "CLIPCLASSIFY_EMBEDDING_DIM": "256",
                "CLIPCLASSIFY_LOG_LEVEL": "warning",
                "UNRELATED": "ignored",
            }
        )

        assert settings.classifier.mode is Mode.PRECOMPUTED
        assert settings.classifier.embeddings_path == Path("/tmp/cache.json")
        assert settings.classifier.max_workers == 4
        assert settings.embedder.dim == 256
        assert settings.log_level == "WARNING"

    @pytest.mark.parametrize("raw, expected", [("true", True), ("1", True), ("false", False)])
    def test_log_json(self, raw, expected):
        assert AppSettings.from_env({"CLIPCLASSIFY_LOG_JSON": raw}).log_json is expected

    def test_invalid_value_raises_config_error(self):
        with pytest.raises(ConfigError):
            AppSettings.from_env({"CLIPCLASSIFY_MAX_WORKERS": "0"})
