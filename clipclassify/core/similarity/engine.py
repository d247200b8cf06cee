# Path: clipclassify/core/similarity/engine.py
# Purpose: Score query vectors against label embeddings by cosine similarity and pick the best label.
# Layer: core/similarity.
# Details: Exhaustive numpy scan over a small candidate matrix; zero-norm vectors score 0, never NaN.

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from clipclassify.core.errors import DimensionMismatchError, NoCandidatesError
from clipclassify.core.models.domain import LabelEmbedding


def _as_vector(vector: np.ndarray) -> np.ndarray:
    return np.asarray(vector, dtype=np.float64).reshape(-1)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Return dot(a, b) / (|a| * |b|), or 0.0 when either vector has zero norm."""

    left = _as_vector(a)
    right = _as_vector(b)
    if left.shape[0] != right.shape[0]:
        raise DimensionMismatchError(
            f"Cannot compare vectors of length {left.shape[0]} and {right.shape[0]}.",
            expected=left.shape[0],
            actual=right.shape[0],
        )

    magnitude = float(np.linalg.norm(left)) * float(np.linalg.norm(right))
    if magnitude == 0.0:
        return 0.0
    return float(np.clip(np.dot(left, right) / magnitude, -1.0, 1.0))


class SimilarityEngine:
    """Nearest-label lookup over a fixed, ordered candidate set.

    Candidate vectors are stacked and their norms computed once, so repeated
    queries against the same store only pay for one matrix-vector product.
    """

    def __init__(self, candidates: Sequence[LabelEmbedding]) -> None:
        self.labels: List[str] = [candidate.label for candidate in candidates]

        if not candidates:
            self.dim = 0
            self._matrix = np.empty((0, 0), dtype=np.float64)
            self._norms = np.empty((0,), dtype=np.float64)
            return

        vectors = [_as_vector(candidate.vector) for candidate in candidates]
        self.dim = vectors[0].shape[0]
        for label, vector in zip(self.labels, vectors):
            if vector.shape[0] != self.dim:
                raise DimensionMismatchError(
                    f"Candidate {label!r} has {vector.shape[0]} values; expected {self.dim}.",
                    expected=self.dim,
                    actual=vector.shape[0],
                )
        self._matrix = np.vstack(vectors)
        self._norms = np.linalg.norm(self._matrix, axis=1)

    def __len__(self) -> int:
        return len(self.labels)

    def scores(self, query: np.ndarray) -> np.ndarray:
        """Return the cosine similarity of ``query`` to every candidate, in candidate order."""

        if not self.labels:
            raise NoCandidatesError("No label embeddings to compare against.")

        vector = _as_vector(query)
        if vector.shape[0] != self.dim:
            raise DimensionMismatchError(
                f"Query has {vector.shape[0]} values; label embeddings have {self.dim}.",
                expected=self.dim,
                actual=vector.shape[0],
            )

        query_norm = float(np.linalg.norm(vector))
        magnitudes = self._norms * query_norm
        dots = self._matrix @ vector
        scores = np.zeros(len(self.labels), dtype=np.float64)
        nonzero = magnitudes > 0.0
        scores[nonzero] = dots[nonzero] / magnitudes[nonzero]
        return np.clip(scores, -1.0, 1.0)

    def best_match(self, query: np.ndarray) -> Tuple[str, float]:
        """
        Return ``(label, score)`` for the most similar candidate.

        Ties go to the first candidate reaching the maximum score.
        """

        scores = self.scores(query)
        # argmax returns the first index of the maximum.
        index = int(np.argmax(scores))
        return self.labels[index], float(scores[index])


def best_match(query: np.ndarray, candidates: Sequence[LabelEmbedding]) -> Tuple[str, float]:
    """Convenience wrapper building a one-off :class:`SimilarityEngine`."""

    return SimilarityEngine(candidates).best_match(query)
