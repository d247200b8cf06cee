# Path: clipclassify/core/__init__.py
# Purpose: Package initializer for core application layer.
# Layer: core.
# Details: Aggregates subpackages for embedders, the embedding store, similarity, classification, and generation.
