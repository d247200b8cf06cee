# Path: clipclassify/core/classification/__init__.py
# Purpose: Package initializer for classification orchestration.
# Layer: core/classification.
# Details: Exposes the orchestrator, its run states, and the per-mode store acquisitions.

from .acquisition import PrecomputedAcquisition, RuntimeAcquisition, StoreAcquisition, default_acquisitions
from .orchestrator import ClassificationOrchestrator, RunState

__all__ = [
    "ClassificationOrchestrator",
    "PrecomputedAcquisition",
    "RunState",
    "RuntimeAcquisition",
    "StoreAcquisition",
    "default_acquisitions",
]
