# Path: clipclassify/core/classification/orchestrator.py
# Purpose: Drive a classification run from store acquisition through per-image matching.
# Layer: core/classification.
# Details: Setup failures abort the run; failures on individual images are logged and skipped.

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from clipclassify.config.settings import ClassifierSettings
from clipclassify.core.embedders.base import Embedder
from clipclassify.core.embedders.serialized import SerializedEmbedder
from clipclassify.core.errors import (
    ClassificationError,
    ConfigError,
    DecodeError,
    DimensionMismatchError,
    EncodeError,
    NoCandidatesError,
)
from clipclassify.core.models.domain import (
    ClassificationResult,
    ClassificationRun,
    EmbeddingManifest,
    ImageInput,
    ItemFailure,
    Mode,
)
from clipclassify.core.preprocessing.image_preparer import ImagePreparer
from clipclassify.core.similarity.engine import SimilarityEngine
from clipclassify.core.store.manifest_store import EmbeddingStore

from .acquisition import StoreAcquisition, default_acquisitions

logger = logging.getLogger(__name__)

SKIPPABLE_ERRORS = (DecodeError, EncodeError, DimensionMismatchError, OSError)


class RunState(str, Enum):
    INIT = "init"
    STORE_READY = "store_ready"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


class ClassificationOrchestrator:
    """High-level service bridging the CLI/API layers with the store, encoder, and similarity engine.

    The embedder is always wrapped in :class:`SerializedEmbedder`, so with
    ``max_workers > 1`` images are decoded concurrently while encode calls
    still run one at a time. Results come back in input order.
    """

    def __init__(
        self,
        embedder: Embedder,
        settings: ClassifierSettings,
        store: Optional[EmbeddingStore] = None,
        preparer: Optional[ImagePreparer] = None,
        acquisitions: Optional[Dict[Mode, StoreAcquisition]] = None,
    ) -> None:
        self.embedder = SerializedEmbedder.wrap(embedder)
        self.settings = settings
        self.store = store or EmbeddingStore()
        self.preparer = preparer or ImagePreparer()
        self.acquisitions = acquisitions or default_acquisitions()
        self.state = RunState.INIT
        self.manifest: Optional[EmbeddingManifest] = None
        self._engine: Optional[SimilarityEngine] = None

    @property
    def mode(self) -> Mode:
        return self.settings.mode

    def acquire_store(self, labels: Optional[Sequence[str]] = None) -> EmbeddingManifest:
        """
        Obtain the label embeddings for this run according to the configured mode.

        External calls:
        - clipclassify/core/classification/acquisition.py::StoreAcquisition.acquire - builds or loads the manifest.
        - clipclassify/core/similarity/engine.py::SimilarityEngine - stacks the candidate vectors once.
        """

        acquisition = self.acquisitions.get(self.mode)
        if acquisition is None:
            self.state = RunState.FAILED
            raise ConfigError(f"No store acquisition registered for mode {self.mode.value!r}.")

        try:
            manifest = acquisition.acquire(self.store, self.embedder, self.settings, labels)
            engine = SimilarityEngine(manifest.entries)
        except (ClassificationError, OSError):
            self.state = RunState.FAILED
            raise

        self.manifest = manifest
        self._engine = engine
        self.state = RunState.STORE_READY
        logger.info(
            "Embedding store ready (%s): %d labels, dimension %d",
            self.mode.value,
            len(manifest),
            manifest.dimension,
        )
        return manifest

    def classify_one(self, identifier: str, data: bytes) -> ClassificationResult:
        """Decode, encode, and match a single image."""

        engine = self._require_engine()
        image = self.preparer.decode(data)
        query = self._encode_image(image)
        label, score = engine.best_match(query)
        logger.debug("%s: %s (similarity: %.3f)", identifier, label, score)
        return ClassificationResult(input_identifier=identifier, best_label=label, similarity_score=score)

    def classify(self, inputs: Iterable[ImageInput]) -> ClassificationRun:
        """Classify every input in order, skipping the ones that fail."""

        engine = self._require_engine()
        if len(engine) == 0:
            self.state = RunState.FAILED
            raise NoCandidatesError("Embedding store has no labels to classify against.")

        items = list(inputs)
        self.state = RunState.PROCESSING
        logger.info("Processing %d images...", len(items))

        workers = min(self.settings.max_workers, len(items))
        try:
            if workers > 1:
                with ThreadPoolExecutor(max_workers=workers) as executor:
                    futures = [executor.submit(self._process, item) for item in items]
                    outcomes = [future.result() for future in futures]
            else:
                outcomes = [self._process(item) for item in items]
        except Exception:
            self.state = RunState.FAILED
            raise

        run = ClassificationRun()
        for outcome in outcomes:
            if isinstance(outcome, ItemFailure):
                run.failures.append(outcome)
            else:
                run.results.append(outcome)

        self.state = RunState.DONE
        logger.info(
            "Classified %d of %d images (%d skipped)", len(run.results), len(items), len(run.failures)
        )
        return run

    def run(self, inputs: Iterable[ImageInput], labels: Optional[Sequence[str]] = None) -> ClassificationRun:
        """Acquire the store, then classify ``inputs``."""

        self.acquire_store(labels)
        return self.classify(inputs)

    def _process(self, item: ImageInput) -> Union[ClassificationResult, ItemFailure]:
        try:
            return self.classify_one(item.identifier, item.read())
        except SKIPPABLE_ERRORS as exc:
            logger.warning("Skipping %s: %s", item.identifier, exc)
            return ItemFailure(input_identifier=item.identifier, error_type=type(exc).__name__, message=str(exc))

    def _encode_image(self, image) -> np.ndarray:
        try:
            return self.embedder.embed_image(image)
        except EncodeError:
            raise
        except Exception as exc:  # noqa: BLE001 - collaborator failures surface as EncodeError
            raise EncodeError(f"Image encoder failed: {exc}") from exc

    def _require_engine(self) -> SimilarityEngine:
        if self._engine is None:
            raise ConfigError("Embedding store is not ready; call acquire_store() first.")
        return self._engine

    @property
    def labels(self) -> List[str]:
        return self.manifest.labels if self.manifest is not None else []
