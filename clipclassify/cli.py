# Path: clipclassify/cli.py
# Purpose: Command-line entrypoint for classifying image folders and generating embedding caches.
# Layer: root.
# Details: Wires settings, embedder, store, and orchestrator together; exit code 1 on argument or setup errors.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from clipclassify.config import AppSettings, ClassifierSettings
from clipclassify.core.classification import ClassificationOrchestrator
from clipclassify.core.embedders import ClipEmbedder, Embedder
from clipclassify.core.errors import ClassificationError, ConfigError
from clipclassify.core.generation import EmbeddingGenerator
from clipclassify.core.inputs import ImageScanner, load_labels
from clipclassify.core.models import ClassificationRun, Mode
from clipclassify.core.preprocessing import ImagePreparer
from clipclassify.core.store import EmbeddingStore
from clipclassify.logging_config import configure_logging

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ConfigError instead of exiting with status 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise ConfigError(f"{self.prog}: {message}")


def build_parser() -> argparse.ArgumentParser:
    modes = "\n".join(f"  {mode.value:<12} {mode.description}" for mode in Mode)
    parser = _ArgumentParser(
        prog="clipclassify",
        description="Zero-shot image classification against label embeddings.",
        epilog=f"Modes:\n{modes}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--mode", help="Classification mode: runtime or precomputed")
    parser.add_argument("--prompt-template", help="Prompt used to embed labels; '{}' marks the label position")
    parser.add_argument(
        "--generate-embeddings",
        action="store_true",
        help="Encode the label list and write the precomputed embeddings cache, then exit",
    )
    parser.add_argument("--labels", type=Path, help="Label list (.txt one per line, or .json)")
    parser.add_argument("--images", type=Path, help="Folder containing images to classify")
    parser.add_argument("--embeddings-file", type=Path, help="Precomputed embeddings cache path")
    parser.add_argument("--recursive", action="store_true", help="Scan the image folder recursively")
    parser.add_argument("--workers", type=int, help="Number of concurrent image workers")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--log-json", action="store_true", help="Emit log records as JSON lines on stderr")
    return parser


def resolve_settings(args: argparse.Namespace, base: Optional[AppSettings] = None) -> AppSettings:
    """Overlay command-line options on ``base`` settings (environment defaults when omitted)."""

    settings = base or AppSettings.from_env()
    classifier = settings.classifier.model_dump()
    if args.mode is not None:
        classifier["mode"] = Mode.parse(args.mode)
    if args.prompt_template is not None:
        classifier["prompt_template"] = args.prompt_template
    if args.labels is not None:
        classifier["labels_path"] = args.labels
    if args.images is not None:
        classifier["images_dir"] = args.images
    if args.embeddings_file is not None:
        classifier["embeddings_path"] = args.embeddings_file
    if args.workers is not None:
        classifier["max_workers"] = args.workers

    updates = {}
    if args.log_level is not None:
        updates["log_level"] = args.log_level
    if args.log_json:
        updates["log_json"] = True
    try:
        return AppSettings.model_validate(
            {
                **settings.model_dump(),
                **updates,
                "classifier": ClassifierSettings.model_validate(classifier).model_dump(),
            }
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid options: {exc}") from exc


def build_embedder(settings: AppSettings) -> Embedder:
    embedder_settings = settings.embedder
    if embedder_settings.name != "clip":
        raise ConfigError(f"Unknown embedder {embedder_settings.name!r}.")
    return ClipEmbedder(
        model_name=embedder_settings.model_name, device=embedder_settings.device, dim=embedder_settings.dim
    )


def run_generate(
    settings: AppSettings, embedder: Embedder, store: EmbeddingStore, explicit_template: Optional[str] = None
) -> int:
    generator = EmbeddingGenerator(embedder, settings.classifier, store=store)
    manifest = generator.generate_from_file(
        settings.classifier.labels_path,
        output_path=settings.classifier.embeddings_path,
        prompt_template=explicit_template,
    )
    print(f"Wrote {len(manifest)} label embeddings to {settings.classifier.embeddings_path}")
    return 0


def run_classify(
    settings: AppSettings, embedder: Embedder, store: EmbeddingStore, recursive: bool = False
) -> ClassificationRun:
    classifier = settings.classifier
    orchestrator = ClassificationOrchestrator(
        embedder,
        classifier,
        store=store,
        preparer=ImagePreparer(image_size=settings.embedder.image_size),
    )

    labels: Optional[List[str]] = None
    if classifier.mode is Mode.RUNTIME:
        labels = load_labels(classifier.labels_path).labels
        logger.info("Loaded %d labels", len(labels))
    orchestrator.acquire_store(labels)

    inputs = ImageScanner(classifier.images_dir, recursive=recursive).scan()
    return orchestrator.classify(inputs)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code."""

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        settings = resolve_settings(args)
    except ClassificationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level, structured=settings.log_json)
    store = EmbeddingStore(model_identifier=settings.embedder.model_name, default_dimension=settings.embedder.dim)

    try:
        embedder = build_embedder(settings)
        if args.generate_embeddings:
            return run_generate(settings, embedder, store, args.prompt_template)
        run = run_classify(settings, embedder, store, recursive=args.recursive)
    except (ClassificationError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    for result in run.results:
        print(f"{result.input_identifier}: {result.best_label} (similarity: {result.similarity_score:.3f})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
