# Path: clipclassify/core/similarity/__init__.py
# Purpose: Package initializer for similarity scoring.
# Layer: core/similarity.
# Details: Exposes cosine similarity and the best-match engine.

from .engine import SimilarityEngine, best_match, cosine_similarity

__all__ = ["SimilarityEngine", "best_match", "cosine_similarity"]
