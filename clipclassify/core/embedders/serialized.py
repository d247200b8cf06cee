# Path: clipclassify/core/embedders/serialized.py
# Purpose: Guard a non-reentrant embedder so concurrent callers never invoke it simultaneously.
# Layer: core/embedders.
# Details: A single lock serializes every encode call; decoding and similarity stay parallel.

from __future__ import annotations

import threading
from typing import Any

import numpy as np

from .base import Embedder


class SerializedEmbedder(Embedder):
    """Wrap an embedder so at most one encode call runs at a time."""

    def __init__(self, inner: Embedder) -> None:
        self.inner = inner
        self.name = getattr(inner, "name", "embedder")
        self.dim = getattr(inner, "dim", 0)
        self._lock = threading.Lock()

    def embed_image(self, image: Any) -> np.ndarray:
        with self._lock:
            return self.inner.embed_image(image)

    def embed_text(self, text: str) -> np.ndarray:
        with self._lock:
            return self.inner.embed_text(text)

    @classmethod
    def wrap(cls, embedder: Embedder) -> "SerializedEmbedder":
        """Return ``embedder`` unchanged if already serialized, otherwise wrap it."""

        if isinstance(embedder, cls):
            return embedder
        return cls(embedder)
