# Path: clipclassify/core/store/schema.py
# Purpose: Describe the persisted embeddings cache layouts as pydantic models.
# Layer: core/store.
# Details: Field aliases match the camelCase JSON keys; the legacy exporter layout is modelled separately.

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class EmbeddingEntryDocument(BaseModel):
    """One ``{label, embedding}`` object inside the ``embeddings`` array."""

    label: str
    embedding: List[float]


class ManifestDocument(BaseModel):
    """Current cache layout written by the generator."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    version: str
    model: str
    prompt_template: str = Field(alias="promptTemplate")
    embedding_dimension: int = Field(alias="embeddingDimension", ge=1)
    embeddings: List[EmbeddingEntryDocument]
    created_at: datetime = Field(alias="createdAt")


class LegacyLabelEmbedsDocument(BaseModel):
    """Older exporter layout with parallel ``labels`` and ``embeddings`` arrays."""

    model_config = ConfigDict(protected_namespaces=())

    model: str
    embed_dim: int = Field(ge=1)
    prompt_template: str
    labels: List[str]
    embeddings: List[List[float]]
