# Path: clipclassify/core/embedders/clip_embedder.py
# Purpose: Provide a lightweight CLIP-style embedder implementation.
# Layer: core/embedders.
# Details: Uses deterministic numpy-based projections as a placeholder for MobileCLIP model loading.

from __future__ import annotations

import hashlib

import numpy as np
from PIL import Image

from clipclassify.core.errors import EncodeError

from .base import Embedder


class ClipEmbedder(Embedder):
    """Stub implementation that mimics CLIP behavior with lightweight operations.

    Both encoders are deterministic, so caches generated with this embedder
    reproduce byte-for-byte (apart from ``createdAt``).
    """

    def __init__(self, model_name: str = "MobileCLIP-S2", device: str = "cpu", dim: int = 512) -> None:
        if dim < 1:
            raise ValueError("Embedding dimension must be positive.")
        self.model_name = model_name
        self.device = device
        self.dim = dim
        self.name = "clip"

    def embed_image(self, image: Image.Image) -> np.ndarray:
        """Generate a deterministic image embedding based on pixel statistics."""

        if not isinstance(image, Image.Image):
            raise EncodeError(f"ClipEmbedder expects a PIL image, got {type(image).__name__}.")
        try:
            resized = image.convert("RGB").resize((32, 32))
        except (OSError, ValueError) as exc:
            raise EncodeError(f"Image could not be prepared for encoding: {exc}") from exc

        pixels = np.asarray(resized, dtype=np.float32)
        channel_means = pixels.reshape(-1, 3).mean(axis=0)
        flattened = pixels.flatten()
        pooled = np.concatenate([
            channel_means,
            [flattened.mean(), flattened.std()],
            np.percentile(flattened, [25, 50, 75]).astype(np.float32),
        ])
        padded = np.pad(pooled, (0, max(0, self.dim - pooled.size)), mode="wrap")
        return self._normalize(padded[: self.dim])

    def embed_text(self, text: str) -> np.ndarray:
        """Generate a deterministic text embedding based on hashing."""

        if not text or not text.strip():
            raise EncodeError("Cannot encode an empty prompt.")
        hash_bytes = hashlib.sha256(text.encode("utf-8")).digest()
        expanded = np.frombuffer(hash_bytes * (self.dim // len(hash_bytes) + 1), dtype=np.uint8)
        # Byte values centered on zero.
        vector = expanded[: self.dim].astype(np.float32) - 127.5
        return self._normalize(vector)
