# Path: clipclassify/core/preprocessing/image_preparer.py
# Purpose: Turn raw image bytes into the RGB image handle consumed by image encoders.
# Layer: core/preprocessing.
# Details: Pillow does decoding and resizing; the rest of the core treats the result as opaque.

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from clipclassify.core.errors import DecodeError


class ImagePreparer:
    """Decode and resize images to the square input size expected by the encoder."""

    def __init__(self, image_size: int = 256) -> None:
        self.image_size = image_size

    def decode(self, data: bytes) -> Image.Image:
        """Decode ``data`` into an RGB image of ``image_size`` x ``image_size``."""

        if not data:
            raise DecodeError("Image data is empty.")
        try:
            with Image.open(io.BytesIO(data)) as img:
                rgb = img.convert("RGB")
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Could not decode image: {exc}") from exc
        return rgb.resize((self.image_size, self.image_size))

    def open(self, path: Path | str) -> Image.Image:
        """Read and decode an image file."""

        return self.decode(Path(path).read_bytes())
