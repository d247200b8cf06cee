# Path: clipclassify/api/__init__.py
# Purpose: Package initializer for HTTP API layer.
# Layer: api.
# Details: Provides FastAPI app factory for classification endpoints.

from .app import create_app

__all__ = ["create_app"]
