# Path: clipclassify/core/models/domain.py
# Purpose: Define domain models shared across the embedding store, similarity engine, and orchestrator.
# Layer: core/models.
# Details: Lightweight dataclasses keep label embeddings, manifests, and per-image results explicit.

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from clipclassify.core.errors import ConfigError

SCHEMA_VERSION = "1.0"


class Mode(str, Enum):
    """How the label embeddings for a run are obtained."""

    RUNTIME = "runtime"
    PRECOMPUTED = "precomputed"

    @property
    def description(self) -> str:
        if self is Mode.RUNTIME:
            return "Runtime mode: computes label embeddings at startup using the text encoder."
        return "Precomputed mode: loads label embeddings from a saved JSON cache."

    @classmethod
    def parse(cls, value: "str | Mode") -> "Mode":
        """Return the mode named by ``value`` or raise :class:`ConfigError` listing valid modes."""

        if isinstance(value, Mode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(mode.value for mode in cls)
            raise ConfigError(f"Invalid mode '{value}'. Valid modes: {valid}") from None


@dataclass(frozen=True, eq=False)
class LabelEmbedding:
    """A label and the embedding of its rendered prompt."""

    label: str
    vector: np.ndarray

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])


@dataclass(frozen=True)
class EmbeddingManifest:
    """Descriptor of an embedding store: metadata plus ordered label embeddings."""

    model_identifier: str
    prompt_template: str
    dimension: int
    entries: Tuple[LabelEmbedding, ...] = ()
    schema_version: str = SCHEMA_VERSION
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def labels(self) -> List[str]:
        return [entry.label for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def normalized(self) -> "EmbeddingManifest":
        """Return a copy whose entry vectors are L2-normalized."""

        # Local import keeps the models package free of store dependencies at import time.
        from clipclassify.core.store.normalization import normalize

        entries = tuple(LabelEmbedding(entry.label, normalize(entry.vector)) for entry in self.entries)
        return replace(self, entries=entries)


@dataclass
class ImageInput:
    """An image to classify, identified by name and backed by a path or in-memory bytes."""

    identifier: str
    path: Optional[Path] = None
    data: Optional[bytes] = None

    def read(self) -> bytes:
        """Return the raw image bytes, reading from disk when only a path is set."""

        if self.data is not None:
            return self.data
        if self.path is None:
            raise ValueError(f"Image input {self.identifier!r} has neither data nor a path.")
        return Path(self.path).read_bytes()


@dataclass(frozen=True)
class ClassificationResult:
    """Best-matching label for one input image."""

    input_identifier: str
    best_label: str
    similarity_score: float


@dataclass(frozen=True)
class ItemFailure:
    """An input that was skipped, with the reason it failed."""

    input_identifier: str
    error_type: str
    message: str


@dataclass
class ClassificationRun:
    """Outcome of classifying a batch: results in input order plus skipped inputs."""

    results: List[ClassificationResult] = field(default_factory=list)
    failures: List[ItemFailure] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results) + len(self.failures)
