# Path: clipclassify/core/inputs/scanner.py
# Purpose: Scan folders and collect image files to classify.
# Layer: core/inputs.
# Details: Returns inputs sorted by path so every run enumerates images in the same order.

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from clipclassify.core.errors import NotFoundError
from clipclassify.core.models.domain import ImageInput

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}


class ImageScanner:
    """Scan filesystem paths for supported image files."""

    def __init__(self, root: Path, recursive: bool = False) -> None:
        self.root = Path(root)
        self.recursive = recursive

    def scan(self) -> List[ImageInput]:
        """Return discovered images as inputs identified by their path relative to the root."""

        if not self.root.is_dir():
            raise NotFoundError(f"Image folder not found: {self.root}", path=self.root)

        return [
            ImageInput(identifier=path.relative_to(self.root).as_posix(), path=path)
            for path in sorted(self._iter_image_files())
        ]

    def _iter_image_files(self) -> Iterable[Path]:
        """Yield image files under the root directory."""

        pattern = self.root.rglob("*") if self.recursive else self.root.iterdir()
        for path in pattern:
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
                yield path
