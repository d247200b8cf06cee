# Path: clipclassify/core/store/normalization.py
# Purpose: L2-normalize embedding vectors before they are persisted.
# Layer: core/store.
# Details: An epsilon floor on the norm keeps zero vectors at zero instead of producing NaN.

from __future__ import annotations

import numpy as np

NORM_EPSILON = 1e-12


def normalize(vector: np.ndarray) -> np.ndarray:
    """Return ``vector`` scaled to unit length as a flat float32 array."""

    array = np.asarray(vector, dtype=np.float32).reshape(-1)
    norm = float(np.linalg.norm(array.astype(np.float64)))
    return (array / max(norm, NORM_EPSILON)).astype(np.float32)
