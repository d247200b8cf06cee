# Path: clipclassify/config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for the embedder, classification mode, cache paths, and worker limits.

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from clipclassify.core.errors import ConfigError
from clipclassify.core.models.domain import Mode

ENV_PREFIX = "CLIPCLASSIFY_"

DEFAULT_PROMPT_TEMPLATE = "a photo of a {}"


class EmbedderSettings(BaseModel):
    """Settings describing which embedder implementation to use and how to load it."""

    name: str = Field(default="clip", description="Identifier of the embedder implementation.")
    model_name: str = Field(default="MobileCLIP-S2", description="Model identifier recorded in generated caches.")
    device: str = Field(default="cpu", description="Target device for model execution.")
    image_size: int = Field(default=256, ge=1, description="Square edge length images are resized to before encoding.")
    dim: int = Field(default=512, ge=1, description="Embedding dimensionality produced by the encoder.")


class ClassifierSettings(BaseModel):
    """Settings controlling how label embeddings are acquired and how inputs are processed."""

    mode: Mode = Field(default=Mode.RUNTIME, description="How label embeddings are obtained for a run.")
    prompt_template: str = Field(
        default=DEFAULT_PROMPT_TEMPLATE,
        description="Prompt used to embed each label; '{}' marks where the label goes.",
    )
    embeddings_path: Path = Field(
        default=Path("storage/labels_embeds.json"), description="Path to the precomputed embeddings cache."
    )
    labels_path: Path = Field(default=Path("labels.txt"), description="Label list used for runtime builds and generation.")
    images_dir: Path = Field(default=Path("images"), description="Folder scanned for images to classify.")
    max_workers: int = Field(default=1, ge=1, description="Upper bound on concurrent per-image workers.")
    progress_interval: int = Field(default=10, ge=1, description="Labels between progress log lines during generation.")

    @field_validator("prompt_template")
    @classmethod
    def _template_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt template must not be empty")
        return value


class AppSettings(BaseModel):
    """Top-level application settings shared across the CLI, API, and core services."""

    embedder: EmbedderSettings = Field(default_factory=EmbedderSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")
    log_json: bool = Field(default=False, description="Emit log records as JSON lines.")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppSettings":
        """Instantiate settings, applying ``CLIPCLASSIFY_*`` environment overrides when present."""

        env = os.environ if environ is None else environ
        classifier_keys = {
            "MODE": "mode",
            "PROMPT_TEMPLATE": "prompt_template",
            "EMBEDDINGS_PATH": "embeddings_path",
            "LABELS_PATH": "labels_path",
            "IMAGES_DIR": "images_dir",
            "MAX_WORKERS": "max_workers",
        }
        embedder_keys = {"MODEL_NAME": "model_name", "DEVICE": "device", "EMBEDDING_DIM": "dim"}

        classifier: Dict[str, Any] = {}
        embedder: Dict[str, Any] = {}
        payload: Dict[str, Any] = {}
        for suffix, field_name in classifier_keys.items():
            if ENV_PREFIX + suffix in env:
                classifier[field_name] = env[ENV_PREFIX + suffix]
        for suffix, field_name in embedder_keys.items():
            if ENV_PREFIX + suffix in env:
                embedder[field_name] = env[ENV_PREFIX + suffix]
        if ENV_PREFIX + "LOG_LEVEL" in env:
            payload["log_level"] = env[ENV_PREFIX + "LOG_LEVEL"]
        if ENV_PREFIX + "LOG_JSON" in env:
            payload["log_json"] = env[ENV_PREFIX + "LOG_JSON"]
        if classifier:
            payload["classifier"] = classifier
        if embedder:
            payload["embedder"] = embedder

        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Invalid environment configuration: {exc}") from exc


__all__ = ["AppSettings", "ClassifierSettings", "DEFAULT_PROMPT_TEMPLATE", "EmbedderSettings"]
