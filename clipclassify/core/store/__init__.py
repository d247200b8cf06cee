# Path: clipclassify/core/store/__init__.py
# Purpose: Package initializer for the embedding store.
# Layer: core/store.
# Details: Exposes manifest build/serialize/load helpers and the EmbeddingStore facade.

from .manifest_store import (
    EmbeddingStore,
    build_from_labels,
    deserialize,
    render_prompt,
    serialize,
)
from .normalization import NORM_EPSILON, normalize

__all__ = [
    "EmbeddingStore",
    "NORM_EPSILON",
    "build_from_labels",
    "deserialize",
    "normalize",
    "render_prompt",
    "serialize",
]
