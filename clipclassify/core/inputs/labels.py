# Path: clipclassify/core/inputs/labels.py
# Purpose: Load label lists from plain-text or JSON files.
# Layer: core/inputs.
# Details: Text files hold one label per line; JSON files may also carry a model name and prompt template.

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from clipclassify.core.errors import FormatError, NotFoundError

COMMENT_PREFIX = "#"


class LabelsDocument(BaseModel):
    """JSON label list: ``{"model": ..., "prompt_template": ..., "labels": [...]}``."""

    model_config = ConfigDict(protected_namespaces=())

    model: Optional[str] = None
    prompt_template: Optional[str] = None
    labels: List[str]


@dataclass
class LabelList:
    """Labels plus the optional generation overrides that came with them."""

    labels: List[str] = field(default_factory=list)
    model: Optional[str] = None
    prompt_template: Optional[str] = None


def parse_label_lines(text: str) -> List[str]:
    """Return trimmed, non-empty lines, skipping ``#`` comments."""

    labels: List[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith(COMMENT_PREFIX):
            labels.append(stripped)
    return labels


def load_labels(path: Path | str) -> LabelList:
    """Load labels from ``path``; ``.json`` files are parsed as a :class:`LabelsDocument`."""

    source = Path(path)
    if not source.is_file():
        raise NotFoundError(f"Labels file not found: {source}", path=source)

    try:
        text = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"Labels file {source} is not valid UTF-8: {exc}") from exc
    if source.suffix.lower() != ".json":
        return LabelList(labels=parse_label_lines(text))

    try:
        document = LabelsDocument.model_validate(json.loads(text))
    except (ValueError, ValidationError) as exc:
        raise FormatError(f"Invalid labels file {source}: {exc}") from exc

    labels = [label.strip() for label in document.labels if label.strip()]
    return LabelList(labels=labels, model=document.model, prompt_template=document.prompt_template)
