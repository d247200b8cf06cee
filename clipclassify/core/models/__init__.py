# Path: clipclassify/core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across embedding, similarity, and classification layers.

from .domain import (
    SCHEMA_VERSION,
    ClassificationResult,
    ClassificationRun,
    EmbeddingManifest,
    ImageInput,
    ItemFailure,
    LabelEmbedding,
    Mode,
)

__all__ = [
    "SCHEMA_VERSION",
    "ClassificationResult",
    "ClassificationRun",
    "EmbeddingManifest",
    "ImageInput",
    "ItemFailure",
    "LabelEmbedding",
    "Mode",
]
