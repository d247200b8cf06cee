# Path: clipclassify/api/app.py
# Purpose: Expose a FastAPI application for single-image classification.
# Layer: api.
# Details: Provides health, label listing, and a classify endpoint delegating to the orchestrator.

from typing import Any, Dict, Optional

from clipclassify.core.classification.orchestrator import ClassificationOrchestrator
from clipclassify.core.errors import DecodeError, DimensionMismatchError, EncodeError


def create_app(orchestrator: Optional[ClassificationOrchestrator] = None):
    """Create a FastAPI app instance bound to an orchestrator whose store is already acquired."""

    from fastapi import FastAPI, HTTPException, Request

    app = FastAPI(title="clipclassify API", version="0.1.0")

    def _ready() -> ClassificationOrchestrator:
        if orchestrator is None or orchestrator.manifest is None:
            raise HTTPException(status_code=503, detail="Embedding store is not ready.")
        return orchestrator

    @app.get("/health")
    def health() -> Dict[str, str]:
        """Return a simple health status payload."""

        state = orchestrator.state.value if orchestrator is not None else "unconfigured"
        return {"status": "ok", "state": state}

    @app.get("/labels")
    def labels() -> Dict[str, Any]:
        """Describe the loaded embedding store."""

        manifest = _ready().manifest
        return {
            "mode": orchestrator.mode.value,
            "model": manifest.model_identifier,
            "promptTemplate": manifest.prompt_template,
            "embeddingDimension": manifest.dimension,
            "labels": manifest.labels,
        }

    @app.post("/classify")
    async def classify(request: Request, identifier: str = "upload") -> Dict[str, Any]:
        """Classify the raw image bytes sent as the request body."""

        ready = _ready()
        data = await request.body()
        try:
            result = ready.classify_one(identifier, data)
        except (DecodeError, EncodeError, DimensionMismatchError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"identifier": result.input_identifier, "label": result.best_label, "score": result.similarity_score}

    return app
