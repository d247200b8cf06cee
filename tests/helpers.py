"""
Helpers shared by the unit tests: image fixtures and mock encoders.
"""

import io
from pathlib import Path
from typing import Callable, Dict, Sequence

import numpy as np
from PIL import Image

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


def image_bytes(color=RED, size=(8, 8), fmt="PNG") -> bytes:
    """Encode a solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def write_image(directory: Path, name: str, color=RED) -> Path:
    path = directory / name
    path.write_bytes(image_bytes(color))
    return path


def colour_vector(image: Image.Image) -> np.ndarray:
    """Mock image encoder: red and green channels of the top-left pixel; blue images crash it."""
    red, green, blue = image.getpixel((0, 0))
    if blue > 200:
        raise RuntimeError("simulated encoder crash")
    return np.array([red, green], dtype=np.float32)


def text_lookup(table: Dict[str, Sequence[float]]) -> Callable[[str], np.ndarray]:
    def encode(prompt: str) -> np.ndarray:
        return np.asarray(table[prompt], dtype=np.float32)

    return encode
