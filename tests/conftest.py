"""
Shared test fixtures and configuration for pytest.
"""

import logging
from typing import Sequence

import pytest

from clipclassify.config import ClassifierSettings
from clipclassify.core.embedders import CallableEmbedder
from clipclassify.core.models import ImageInput
from clipclassify.logging_config import PACKAGE_LOGGER

from tests.helpers import BLUE, GREEN, RED, colour_vector, image_bytes, text_lookup


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers attached by configure_logging so each test gets fresh streams."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def cat_dog_embedder() -> CallableEmbedder:
    """Text prompts for cat/dog map to the axes; images map to their red/green channels."""
    return CallableEmbedder(
        text_fn=text_lookup({"a photo of a cat": [1.0, 0.0], "a photo of a dog": [0.0, 1.0]}),
        image_fn=colour_vector,
        dim=2,
        name="mock",
    )


@pytest.fixture
def classifier_settings(tmp_path) -> ClassifierSettings:
    return ClassifierSettings(
        prompt_template="a photo of a {}",
        embeddings_path=tmp_path / "cache" / "labels_embeds.json",
        labels_path=tmp_path / "labels.txt",
        images_dir=tmp_path / "images",
    )


@pytest.fixture
def image_inputs() -> Sequence[ImageInput]:
    return [
        ImageInput(identifier="one.png", data=image_bytes(RED)),
        ImageInput(identifier="two.png", data=image_bytes(BLUE)),
        ImageInput(identifier="three.png", data=image_bytes(GREEN)),
    ]
