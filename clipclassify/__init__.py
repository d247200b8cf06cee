# Path: clipclassify/__init__.py
# Purpose: Package initializer for the zero-shot image classifier.
# Layer: root.
# Details: Exposes the package version; subpackages are imported explicitly by callers.

__version__ = "0.1.0"
