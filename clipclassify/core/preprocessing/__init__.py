# Path: clipclassify/core/preprocessing/__init__.py
# Purpose: Package initializer for image preparation.
# Layer: core/preprocessing.
# Details: Exposes the Pillow-backed ImagePreparer.

from .image_preparer import ImagePreparer

__all__ = ["ImagePreparer"]
