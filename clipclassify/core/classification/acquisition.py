# Path: clipclassify/core/classification/acquisition.py
# Purpose: Define how a run obtains its label embeddings for each classification mode.
# Layer: core/classification.
# Details: Runtime builds the manifest with the text encoder; precomputed loads it from the cache file.

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence

from clipclassify.config.settings import ClassifierSettings
from clipclassify.core.embedders.base import Embedder
from clipclassify.core.errors import ConfigError
from clipclassify.core.models.domain import EmbeddingManifest, Mode
from clipclassify.core.store.manifest_store import EmbeddingStore

logger = logging.getLogger(__name__)


class StoreAcquisition(ABC):
    """Interface for producing a ready manifest at the start of a run."""

    mode: Mode
    description: str

    @abstractmethod
    def acquire(
        self,
        store: EmbeddingStore,
        embedder: Embedder,
        settings: ClassifierSettings,
        labels: Optional[Sequence[str]] = None,
    ) -> EmbeddingManifest:
        """Return a complete manifest or raise; never a partial one."""


class RuntimeAcquisition(StoreAcquisition):
    """Encode every label prompt once at startup."""

    mode = Mode.RUNTIME
    description = Mode.RUNTIME.description

    def acquire(
        self,
        store: EmbeddingStore,
        embedder: Embedder,
        settings: ClassifierSettings,
        labels: Optional[Sequence[str]] = None,
    ) -> EmbeddingManifest:
        if labels is None:
            raise ConfigError("Runtime mode requires a label list.")

        logger.info("Computing text embeddings for %d labels...", len(labels))
        return store.build_from_labels(labels, settings.prompt_template, embedder.embed_text)


class PrecomputedAcquisition(StoreAcquisition):
    """Load the manifest written by the embedding generator."""

    mode = Mode.PRECOMPUTED
    description = Mode.PRECOMPUTED.description

    def acquire(
        self,
        store: EmbeddingStore,
        embedder: Embedder,
        settings: ClassifierSettings,
        labels: Optional[Sequence[str]] = None,
    ) -> EmbeddingManifest:
        manifest = store.load(settings.embeddings_path)

        if manifest.prompt_template != settings.prompt_template:
            logger.info(
                "Cache was generated with prompt template %r; configured template %r is ignored.",
                manifest.prompt_template,
                settings.prompt_template,
            )
        encoder_dim = getattr(embedder, "dim", 0)
        if encoder_dim and encoder_dim != manifest.dimension:
            logger.warning(
                "Cache dimension %d differs from encoder dimension %d; every image will fail to match.",
                manifest.dimension,
                encoder_dim,
            )
        return manifest


def default_acquisitions() -> Dict[Mode, StoreAcquisition]:
    return {
        RuntimeAcquisition.mode: RuntimeAcquisition(),
        PrecomputedAcquisition.mode: PrecomputedAcquisition(),
    }
