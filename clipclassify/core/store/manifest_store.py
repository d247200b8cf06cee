# Path: clipclassify/core/store/manifest_store.py
# Purpose: Build, serialize, validate, load, and persist label embedding manifests.
# Layer: core/store.
# Details: Builds are all-or-nothing; saves write a temp file and rename it into place.

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import numpy as np
from pydantic import ValidationError

from clipclassify.core.errors import EncodeError, FormatError, NotFoundError
from clipclassify.core.models.domain import EmbeddingManifest, LabelEmbedding

from .schema import EmbeddingEntryDocument, LegacyLabelEmbedsDocument, ManifestDocument

logger = logging.getLogger(__name__)

PLACEHOLDER = "{}"
LEGACY_VERSION = "legacy"
DEFAULT_DIMENSION = 512


def render_prompt(template: str, label: str) -> str:
    """Substitute ``label`` into ``template``, appending it when no ``{}`` placeholder exists."""

    if PLACEHOLDER in template:
        return template.replace(PLACEHOLDER, label)
    return f"{template} {label}"


def build_from_labels(
    labels: Iterable[str],
    prompt_template: str,
    encode: Callable[[str], Any],
    model_identifier: str = "unknown",
    default_dimension: int = DEFAULT_DIMENSION,
) -> EmbeddingManifest:
    """
    Encode one prompt per label and collect the vectors into a manifest.

    The manifest only exists once every label has been encoded. Any encode
    failure, empty vector, or dimension change between labels raises
    :class:`EncodeError`. An empty label list yields a zero-entry manifest
    of ``default_dimension``.
    """

    entries: List[LabelEmbedding] = []
    dimension: Optional[int] = None

    for label in labels:
        prompt = render_prompt(prompt_template, label)
        try:
            vector = np.asarray(encode(prompt), dtype=np.float32).reshape(-1)
        except Exception as exc:  # noqa: BLE001 - any encoder failure aborts the build
            raise EncodeError(f"Failed to encode label {label!r} (prompt {prompt!r}): {exc}") from exc

        if vector.size == 0:
            raise EncodeError(f"Encoder returned an empty vector for label {label!r}.")
        if dimension is None:
            dimension = int(vector.size)
        elif vector.size != dimension:
            raise EncodeError(
                f"Encoder returned {vector.size} values for label {label!r}; earlier labels had {dimension}."
            )
        entries.append(LabelEmbedding(label=label, vector=vector))

    return EmbeddingManifest(
        model_identifier=model_identifier,
        prompt_template=prompt_template,
        dimension=dimension if dimension is not None else default_dimension,
        entries=tuple(entries),
    )


def serialize(manifest: EmbeddingManifest) -> bytes:
    """Encode a manifest as sorted-key, indented UTF-8 JSON."""

    embeddings: List[EmbeddingEntryDocument] = []
    for entry in manifest.entries:
        if entry.dimension != manifest.dimension:
            raise FormatError(
                f"Entry {entry.label!r} has {entry.dimension} values; manifest dimension is {manifest.dimension}."
            )
        embeddings.append(EmbeddingEntryDocument(label=entry.label, embedding=[float(x) for x in entry.vector]))

    document = ManifestDocument(
        version=manifest.schema_version,
        model=manifest.model_identifier,
        prompt_template=manifest.prompt_template,
        embedding_dimension=manifest.dimension,
        embeddings=embeddings,
        created_at=manifest.created_at,
    )
    payload = document.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False).encode("utf-8")


def deserialize(data: bytes) -> EmbeddingManifest:
    """Decode and validate cache bytes, raising :class:`FormatError` on any inconsistency."""

    try:
        payload = json.loads(data)
    except ValueError as exc:
        raise FormatError(f"Embeddings cache is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise FormatError("Embeddings cache must be a JSON object.")

    if "embed_dim" in payload and "embeddingDimension" not in payload:
        return _from_legacy(payload)

    try:
        document = ManifestDocument.model_validate(payload)
    except ValidationError as exc:
        raise FormatError(f"Invalid embeddings cache: {exc}") from exc

    entries: List[LabelEmbedding] = []
    for index, item in enumerate(document.embeddings):
        if len(item.embedding) != document.embedding_dimension:
            raise FormatError(
                f"Entry {index} ({item.label!r}) has {len(item.embedding)} values; "
                f"embeddingDimension is {document.embedding_dimension}."
            )
        entries.append(LabelEmbedding(label=item.label, vector=np.asarray(item.embedding, dtype=np.float32)))

    return EmbeddingManifest(
        model_identifier=document.model,
        prompt_template=document.prompt_template,
        dimension=document.embedding_dimension,
        entries=tuple(entries),
        schema_version=document.version,
        created_at=document.created_at,
    )


def _from_legacy(payload: Dict[str, Any]) -> EmbeddingManifest:
    try:
        document = LegacyLabelEmbedsDocument.model_validate(payload)
    except ValidationError as exc:
        raise FormatError(f"Invalid legacy embeddings cache: {exc}") from exc

    if len(document.labels) != len(document.embeddings):
        raise FormatError(
            f"Legacy cache lists {len(document.labels)} labels but {len(document.embeddings)} embeddings."
        )
    entries: List[LabelEmbedding] = []
    for label, vector in zip(document.labels, document.embeddings):
        if len(vector) != document.embed_dim:
            raise FormatError(f"Entry {label!r} has {len(vector)} values; embed_dim is {document.embed_dim}.")
        entries.append(LabelEmbedding(label=label, vector=np.asarray(vector, dtype=np.float32)))

    return EmbeddingManifest(
        model_identifier=document.model,
        prompt_template=document.prompt_template,
        dimension=document.embed_dim,
        entries=tuple(entries),
        schema_version=LEGACY_VERSION,
    )


class EmbeddingStore:
    """Owns manifest construction and the on-disk embeddings cache.

    The store is stateless apart from its defaults; manifests it returns are
    immutable and can be shared read-only with the similarity engine.
    """

    def __init__(self, model_identifier: str = "MobileCLIP-S2", default_dimension: int = DEFAULT_DIMENSION) -> None:
        self.model_identifier = model_identifier
        self.default_dimension = default_dimension

    def build_from_labels(
        self,
        labels: Iterable[str],
        prompt_template: str,
        encode: Callable[[str], Any],
        model_identifier: Optional[str] = None,
    ) -> EmbeddingManifest:
        """Build a manifest in memory. See :func:`build_from_labels`."""

        return build_from_labels(
            labels,
            prompt_template,
            encode,
            model_identifier=model_identifier or self.model_identifier,
            default_dimension=self.default_dimension,
        )

    serialize = staticmethod(serialize)
    deserialize = staticmethod(deserialize)

    def load(self, path: Path | str) -> EmbeddingManifest:
        """Load a cache previously written by :meth:`save`."""

        target = Path(path)
        if not target.is_file():
            raise NotFoundError(f"Precomputed embeddings file not found at: {target}", path=target)

        manifest = deserialize(target.read_bytes())
        logger.info(
            "Loaded precomputed embeddings from %s: version=%s model=%s labels=%d dimension=%d created=%s",
            target.name,
            manifest.schema_version,
            manifest.model_identifier,
            len(manifest),
            manifest.dimension,
            manifest.created_at.isoformat(),
        )
        return manifest

    def save(self, manifest: EmbeddingManifest, path: Path | str, normalize: bool = True) -> Path:
        """
        Persist ``manifest`` to ``path`` atomically.

        Vectors are L2-normalized first unless ``normalize`` is False. The
        bytes go to a temporary file in the target directory which is then
        renamed over ``path``; on failure the temporary file is removed and
        any existing cache is left untouched.
        """

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        payload = serialize(manifest.normalized() if normalize else manifest)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

        logger.debug("Wrote %d bytes to %s", len(payload), target)
        return target
