# Path: clipclassify/core/errors.py
# Purpose: Define the exception taxonomy shared by the store, similarity, and classification layers.
# Layer: core.
# Details: Setup failures (config, missing or malformed caches) are fatal; per-image failures are skippable.

"""
Custom exceptions for zero-shot classification.

Store-construction errors abort a run. Errors raised while handling a
single image (``DecodeError``, ``EncodeError``, ``DimensionMismatchError``)
are recorded against that image and the batch continues.
"""


class ClassificationError(Exception):
    """Base exception for all classifier errors."""


class ConfigError(ClassificationError):
    """
    Invalid mode, argument, or settings value.

    Raised when:
    - An unknown classification mode is requested
    - A required argument is missing for the selected mode
    - Environment overrides fail validation
    """


class NotFoundError(ClassificationError):
    """
    A required file or folder does not exist.

    Raised for a missing precomputed embeddings cache, label list, or image folder.
    """

    def __init__(self, message: str, path: object = None):
        super().__init__(message)
        self.path = path


class FormatError(ClassificationError):
    """
    Persisted data is malformed.

    Raised when:
    - A cache or labels file is not valid JSON
    - A required field is missing or has the wrong type
    - An entry's vector length differs from the declared dimension
    """


class EncodeError(ClassificationError):
    """The encoder failed to produce a usable vector."""


class DecodeError(ClassificationError):
    """Raw image bytes could not be decoded into an image."""


class DimensionMismatchError(ClassificationError):
    """A query vector and the candidate vectors have different lengths."""

    def __init__(self, message: str, expected: int = None, actual: int = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class NoCandidatesError(ClassificationError):
    """A best match was requested against an empty candidate set."""
