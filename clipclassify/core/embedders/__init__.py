# Path: clipclassify/core/embedders/__init__.py
# Purpose: Package initializer for embedder implementations and interfaces.
# Layer: core/embedders.
# Details: Exposes the base interface, the callable adapter, the serializing wrapper, and the CLIP stub.

from .base import Embedder, ImageEncodeFn, TextEncodeFn
from .callable_embedder import CallableEmbedder
from .clip_embedder import ClipEmbedder
from .serialized import SerializedEmbedder

__all__ = [
    "Embedder",
    "ImageEncodeFn",
    "TextEncodeFn",
    "CallableEmbedder",
    "ClipEmbedder",
    "SerializedEmbedder",
]
