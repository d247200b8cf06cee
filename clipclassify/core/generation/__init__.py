# Path: clipclassify/core/generation/__init__.py
# Purpose: Package initializer for offline embedding generation.
# Layer: core/generation.
# Details: Exposes the EmbeddingGenerator batch job.

from .generator import EmbeddingGenerator

__all__ = ["EmbeddingGenerator"]
