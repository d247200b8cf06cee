# Path: clipclassify/config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes settings models for application-wide configuration.

from .settings import DEFAULT_PROMPT_TEMPLATE, AppSettings, ClassifierSettings, EmbedderSettings

__all__ = ["AppSettings", "ClassifierSettings", "DEFAULT_PROMPT_TEMPLATE", "EmbedderSettings"]
