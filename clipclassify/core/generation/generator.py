# Path: clipclassify/core/generation/generator.py
# Purpose: Build the precomputed label embeddings cache from a label list.
# Layer: core/generation.
# Details: Encodes each prompt with progress reporting, then persists the normalized manifest atomically.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from tqdm import tqdm

from clipclassify.config.settings import ClassifierSettings
from clipclassify.core.embedders.base import Embedder
from clipclassify.core.inputs.labels import load_labels
from clipclassify.core.models.domain import EmbeddingManifest
from clipclassify.core.store.manifest_store import EmbeddingStore

logger = logging.getLogger(__name__)


class EmbeddingGenerator:
    """Offline job producing the cache consumed by precomputed mode."""

    def __init__(
        self,
        embedder: Embedder,
        settings: ClassifierSettings,
        store: Optional[EmbeddingStore] = None,
        show_progress: bool = True,
    ) -> None:
        self.embedder = embedder
        self.settings = settings
        self.store = store or EmbeddingStore()
        self.show_progress = show_progress

    def generate(
        self,
        labels: Sequence[str],
        output_path: Optional[Path | str] = None,
        prompt_template: Optional[str] = None,
        model_identifier: Optional[str] = None,
    ) -> EmbeddingManifest:
        """
        Encode ``labels`` and write the cache to ``output_path``.

        External calls:
        - clipclassify/core/store/manifest_store.py::EmbeddingStore.build_from_labels - encodes every prompt.
        - clipclassify/core/store/manifest_store.py::EmbeddingStore.save - writes the normalized cache atomically.
        """

        template = prompt_template or self.settings.prompt_template
        target = Path(output_path) if output_path is not None else self.settings.embeddings_path
        total = len(labels)
        interval = self.settings.progress_interval
        processed = 0

        def encode(prompt: str) -> np.ndarray:
            nonlocal processed
            vector = self.embedder.embed_text(prompt)
            processed += 1
            if processed % interval == 0:
                logger.info("Processed %d/%d labels", processed, total)
            return vector

        logger.info("Generating precomputed embeddings for %d labels...", total)
        with tqdm(labels, desc="Encoding labels", unit="label", disable=not self.show_progress) as progress:
            manifest = self.store.build_from_labels(progress, template, encode, model_identifier=model_identifier)

        normalized = manifest.normalized()
        self.store.save(normalized, target, normalize=False)

        logger.info(
            "Precomputed embeddings saved to %s (labels=%d, dimension=%d, size=%d bytes)",
            target,
            len(normalized),
            normalized.dimension,
            target.stat().st_size,
        )
        return normalized

    def generate_from_file(
        self,
        labels_path: Path | str,
        output_path: Optional[Path | str] = None,
        prompt_template: Optional[str] = None,
    ) -> EmbeddingManifest:
        """Load labels from disk and generate the cache; JSON label files may set model and template."""

        label_list = load_labels(labels_path)
        return self.generate(
            label_list.labels,
            output_path=output_path,
            prompt_template=prompt_template or label_list.prompt_template,
            model_identifier=label_list.model,
        )
