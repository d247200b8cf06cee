# Path: clipclassify/core/embedders/base.py
# Purpose: Define the Embedder interface for image and text embeddings.
# Layer: core/embedders.
# Details: Encoders are injected black boxes; classification code only depends on this contract.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

import numpy as np

from clipclassify.core.store.normalization import normalize

TextEncodeFn = Callable[[str], np.ndarray]
ImageEncodeFn = Callable[[Any], np.ndarray]


class Embedder(ABC):
    """Abstract base class for the image/text encoder pair used by the classifier.

    Implementations raise :class:`~clipclassify.core.errors.EncodeError` when a
    vector cannot be produced. Image handles are opaque to the core; they come
    from :class:`~clipclassify.core.preprocessing.ImagePreparer`.
    """

    name: str
    dim: int

    @abstractmethod
    def embed_image(self, image: Any) -> np.ndarray:
        """Return an embedding for a prepared image."""

    @abstractmethod
    def embed_text(self, text: str) -> np.ndarray:
        """Return an embedding for a text prompt."""

    @staticmethod
    def _normalize(vector: np.ndarray) -> np.ndarray:
        """Normalize embedding vectors to unit length to simplify similarity comparisons."""

        return normalize(vector)
