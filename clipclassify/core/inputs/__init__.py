# Path: clipclassify/core/inputs/__init__.py
# Purpose: Package initializer for input discovery helpers.
# Layer: core/inputs.
# Details: Exposes label loading and image folder scanning.

from .labels import LabelList, load_labels, parse_label_lines
from .scanner import SUPPORTED_EXTENSIONS, ImageScanner

__all__ = ["ImageScanner", "LabelList", "SUPPORTED_EXTENSIONS", "load_labels", "parse_label_lines"]
