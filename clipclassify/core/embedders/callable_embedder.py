# Path: clipclassify/core/embedders/callable_embedder.py
# Purpose: Adapt plain encode functions to the Embedder interface.
# Layer: core/embedders.
# Details: Lets callers inject TextEncodeFn/ImageEncodeFn callables, e.g. model wrappers or test doubles.

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from clipclassify.core.errors import EncodeError

from .base import Embedder, ImageEncodeFn, TextEncodeFn


class CallableEmbedder(Embedder):
    """Embedder backed by user-supplied encode callables.

    Exceptions other than :class:`EncodeError` raised by the callables are
    wrapped in ``EncodeError`` so callers only deal with the shared taxonomy.
    """

    def __init__(
        self,
        text_fn: Optional[TextEncodeFn] = None,
        image_fn: Optional[ImageEncodeFn] = None,
        dim: int = 0,
        name: str = "callable",
    ) -> None:
        self._text_fn = text_fn
        self._image_fn = image_fn
        self.dim = dim
        self.name = name

    def embed_text(self, text: str) -> np.ndarray:
        if self._text_fn is None:
            raise EncodeError(f"Embedder {self.name!r} has no text encoder.")
        return self._call(self._text_fn, text, "text")

    def embed_image(self, image: Any) -> np.ndarray:
        if self._image_fn is None:
            raise EncodeError(f"Embedder {self.name!r} has no image encoder.")
        return self._call(self._image_fn, image, "image")

    @staticmethod
    def _call(fn, value: Any, modality: str) -> np.ndarray:
        try:
            result = fn(value)
        except EncodeError:
            raise
        except Exception as exc:  # noqa: BLE001 - collaborator failures surface as EncodeError
            raise EncodeError(f"{modality} encoder failed: {exc}") from exc
        return np.asarray(result, dtype=np.float32).reshape(-1)
