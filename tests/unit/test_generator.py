"""
Unit tests for precomputed embedding generation.
"""

import json
import logging

import numpy as np
import pytest

from clipclassify.core.embedders import CallableEmbedder
from clipclassify.core.errors import EncodeError, NotFoundError
from clipclassify.core.generation import EmbeddingGenerator
from clipclassify.core.store import EmbeddingStore


def counting_embedder(dim=3):
    def encode(prompt):
        vector = np.zeros(dim, dtype=np.float32)
        vector[len(prompt) % dim] = 2.0
        return vector

    return CallableEmbedder(text_fn=encode, dim=dim, name="counting")


class TestGenerate:
    def test_writes_normalized_cache(self, classifier_settings):
        generator = EmbeddingGenerator(counting_embedder(), classifier_settings, show_progress=False)

        manifest = generator.generate(["cat", "dog", "zebra"])

        path = classifier_settings.embeddings_path
        assert path.is_file()
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert [e["label"] for e in payload["embeddings"]] == ["cat", "dog", "zebra"]
        assert payload["embeddingDimension"] == 3
        assert payload["promptTemplate"] == "a photo of a {}"
        for entry in manifest.entries:
            assert np.linalg.norm(entry.vector) == pytest.approx(1.0, abs=1e-6)

    def test_cache_loads_back(self, classifier_settings, tmp_path):
        target = tmp_path / "out.json"
        generator = EmbeddingGenerator(counting_embedder(), classifier_settings, show_progress=False)

        written = generator.generate(["cat", "dog"], output_path=target, model_identifier="mock-model")
        loaded = EmbeddingStore().load(target)

        assert loaded.labels == written.labels
        assert loaded.model_identifier == "mock-model"
        for before, after in zip(written.entries, loaded.entries):
            np.testing.assert_allclose(after.vector, before.vector)

    def test_explicit_template(self, classifier_settings):
        prompts = []
        embedder = CallableEmbedder(text_fn=lambda p: prompts.append(p) or [1.0, 0.0], dim=2)
        generator = EmbeddingGenerator(embedder, classifier_settings, show_progress=False)

        manifest = generator.generate(["cat"], prompt_template="a sketch of a")

        assert prompts == ["a sketch of a cat"]
        assert manifest.prompt_template == "a sketch of a"

    def test_progress_logged_every_interval(self, classifier_settings, caplog):
        settings = classifier_settings.model_copy(update={"progress_interval": 10})
        generator = EmbeddingGenerator(counting_embedder(), settings, show_progress=False)
        caplog.set_level(logging.INFO, logger="clipclassify")

        generator.generate([f"label-{i}" for i in range(25)])

        progress = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Processed")]
        assert progress == ["Processed 10/25 labels", "Processed 20/25 labels"]
        assert any("size=" in r.getMessage() for r in caplog.records)

    def test_failure_leaves_previous_cache(self, classifier_settings):
        path = classifier_settings.embeddings_path
        EmbeddingGenerator(counting_embedder(), classifier_settings, show_progress=False).generate(["cat"])
        before = path.read_bytes()

        def flaky(prompt):
            if prompt.endswith("dog"):
                raise RuntimeError("encoder offline")
            return [1.0, 0.0, 0.0]

        generator = EmbeddingGenerator(CallableEmbedder(text_fn=flaky, dim=3), classifier_settings, show_progress=False)
        with pytest.raises(EncodeError):
            generator.generate(["cat", "dog"])

        assert path.read_bytes() == before

    def test_progress_bar_closed_on_failure(self, classifier_settings, monkeypatch):
        bars = []

        class RecordingBar:
            def __init__(self, iterable, **kwargs):
                self.iterable = iterable
                self.closed = False
                bars.append(self)

            def __iter__(self):
                return iter(self.iterable)

            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                self.closed = True
                return False

        monkeypatch.setattr("clipclassify.core.generation.generator.tqdm", RecordingBar)
        embedder = CallableEmbedder(text_fn=lambda prompt: [] if prompt.endswith("dog") else [1.0], dim=1)
        generator = EmbeddingGenerator(embedder, classifier_settings, show_progress=False)

        with pytest.raises(EncodeError):
            generator.generate(["cat", "dog"])

        assert [bar.closed for bar in bars] == [True]
        assert not classifier_settings.embeddings_path.exists()


class TestGenerateFromFile:
    def test_text_labels(self, classifier_settings):
        classifier_settings.labels_path.write_text("# animals\ncat\n\n  dog  \n", encoding="utf-8")
        generator = EmbeddingGenerator(counting_embedder(), classifier_settings, show_progress=False)

        manifest = generator.generate_from_file(classifier_settings.labels_path)

        assert manifest.labels == ["cat", "dog"]

    def test_json_labels_carry_model_and_template(self, classifier_settings, tmp_path):
        labels_path = tmp_path / "labels.json"
        labels_path.write_text(
            json.dumps({"model": "mobileclip_s2", "prompt_template": "an image of {}", "labels": ["owl"]}),
            encoding="utf-8",
        )
        generator = EmbeddingGenerator(counting_embedder(), classifier_settings, show_progress=False)

        manifest = generator.generate_from_file(labels_path)

        assert manifest.model_identifier == "mobileclip_s2"
        assert manifest.prompt_template == "an image of {}"

    def test_explicit_template_beats_json(self, classifier_settings, tmp_path):
        labels_path = tmp_path / "labels.json"
        labels_path.write_text(json.dumps({"prompt_template": "an image of {}", "labels": ["owl"]}), encoding="utf-8")
        generator = EmbeddingGenerator(counting_embedder(), classifier_settings, show_progress=False)

        manifest = generator.generate_from_file(labels_path, prompt_template="a drawing of {}")

        assert manifest.prompt_template == "a drawing of {}"

    def test_missing_labels_file(self, classifier_settings):
        generator = EmbeddingGenerator(counting_embedder(), classifier_settings, show_progress=False)

        with pytest.raises(NotFoundError):
            generator.generate_from_file(classifier_settings.labels_path)
