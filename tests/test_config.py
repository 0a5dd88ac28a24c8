"""Tests for container wiring and the session lifecycle."""
from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from application.use_cases.cache_lifecycle import CACHE_CLEARED_MESSAGE, EMBEDDINGS_KEY, SETTINGS_KEY
from application.use_cases.find_similar import SEARCHING_MESSAGE
from domain.errors import ConfigError
from infrastructure.config import ContainerConfig, build_default_container
from infrastructure.corpus.in_memory_corpus import InMemoryCorpus
from infrastructure.credentials.api_key_providers import EnvCredentialProvider, StaticCredentialProvider
from infrastructure.storage.in_memory_snapshot_store import InMemorySnapshotStore
from ui.presenters import CollectingPresenter

DAY = 24 * 60 * 60
NOW = 100 * DAY


def _notes() -> InMemoryCorpus:
    return InMemoryCorpus(
        {
            "a.md": "the cat sat on the mat",
            "b.md": "the cat sat on the mat",
            "c.md": "quantum entanglement theory",
        },
        modified_at=NOW - DAY,
    )


class TestBuildDefaultContainer(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemorySnapshotStore()
        self.presenter = CollectingPresenter()

    def build(self, **kwargs):
        kwargs.setdefault("corpus", _notes())
        kwargs.setdefault("snapshot_store", self.store)
        kwargs.setdefault("credentials", StaticCredentialProvider())
        kwargs.setdefault("presenter", self.presenter)
        return build_default_container(ContainerConfig(max_workers=1), clock=lambda: NOW, **kwargs)

    def test_restore_drops_expired_entries(self) -> None:
        self.store.save_snapshot(
            EMBEDDINGS_KEY,
            {
                "old.md": {"embedding": [1.0, 0.0], "timestamp": NOW - 8 * DAY, "backend": "local"},
                "new.md": {"embedding": [0.0, 1.0], "timestamp": NOW - DAY, "backend": "local"},
            },
        )

        container = self.build()

        self.assertEqual(len(container.cache), 1)
        self.assertIn("new.md", container.cache)

    def test_restore_uses_persisted_expiration(self) -> None:
        self.store.save_snapshot(SETTINGS_KEY, {"cache_expiration_days": 30})
        self.store.save_snapshot(
            EMBEDDINGS_KEY,
            {"old.md": {"embedding": [1.0], "timestamp": NOW - 8 * DAY, "backend": "local"}},
        )

        container = self.build()

        self.assertEqual(container.settings.cache_expiration_days, 30)
        self.assertIn("old.md", container.cache)

    def test_find_similar_through_container(self) -> None:
        container = self.build()

        results = container.find_similar("a.md")

        self.assertEqual([result.document_id for result in results], ["b.md"])
        self.assertAlmostEqual(results[0].score, 1.0)
        self.assertEqual(self.presenter.last_query, "a.md")
        self.assertIn(SEARCHING_MESSAGE, self.presenter.notifications)
        self.assertIsNotNone(self.store.load_snapshot(EMBEDDINGS_KEY))

    def test_changing_embedding_dimension_recomputes_cached_vectors(self) -> None:
        corpus = _notes()
        first = self.build(corpus=corpus)
        first.find_similar("a.md")
        first.close()
        corpus.write("b.md", "the cat sat on the mat", modified_at=NOW - DAY / 2)

        second = build_default_container(
            ContainerConfig(embedding_dimension=300, max_workers=1),
            corpus=corpus,
            snapshot_store=self.store,
            credentials=StaticCredentialProvider(),
            clock=lambda: NOW,
        )
        second.update_settings(similarity_floor=0.5)
        results = second.find_similar("a.md")

        self.assertEqual([result.document_id for result in results], ["b.md"])
        for document_id in ("a.md", "b.md", "c.md"):
            entry = second.cache.get(document_id)
            assert entry is not None
            self.assertEqual(entry.dimension, 300)
            self.assertEqual(entry.model_id, "token-hash-300")

    def test_update_settings_persists_and_validates(self) -> None:
        container = self.build()

        container.update_settings(result_cap=3, ignored_path_prefixes=("archive/",))
        with self.assertRaises(ConfigError):
            container.update_settings(similarity_floor=1.5)

        self.assertEqual(container.settings.result_cap, 3)
        self.assertEqual(container.settings.similarity_floor, 0.7)
        saved = self.store.load_snapshot(SETTINGS_KEY)
        self.assertEqual(saved["result_cap"], 3)
        self.assertEqual(saved["ignored_path_prefixes"], ["archive/"])

        reloaded = self.build()
        self.assertEqual(reloaded.settings, container.settings)

    def test_close_flushes_cache(self) -> None:
        container = self.build()
        container.find_similar("a.md")
        self.store.save_snapshot(EMBEDDINGS_KEY, {})

        container.close()

        self.assertEqual(sorted(self.store.load_snapshot(EMBEDDINGS_KEY)), ["a.md", "b.md", "c.md"])

    def test_clear_cache_notifies_and_persists(self) -> None:
        container = self.build()
        container.find_similar("a.md")

        container.clear_cache()

        self.assertEqual(len(container.cache), 0)
        self.assertEqual(self.store.load_snapshot(EMBEDDINGS_KEY), {})
        self.assertEqual(self.presenter.notifications[-1], CACHE_CLEARED_MESSAGE)

    def test_active_document_change_requires_visible_presenter(self) -> None:
        self.assertIsNone(self.build(presenter=None).on_active_document_changed("a.md"))

        hidden = CollectingPresenter(active=False)
        self.assertIsNone(self.build(presenter=hidden).on_active_document_changed("a.md"))
        self.assertIsNone(hidden.last_query)

        results = self.build().on_active_document_changed("a.md")
        self.assertEqual([result.document_id for result in results or []], ["b.md"])

    def test_default_credentials_read_environment(self) -> None:
        with mock.patch.dict(os.environ, {"NOTETHREAD_API_KEY": "env-key"}):
            container = build_default_container(
                ContainerConfig(corpus="memory", snapshot_store="memory"),
                clock=lambda: NOW,
            )
            self.assertIsInstance(container.credentials, EnvCredentialProvider)
            self.assertEqual(container.credentials.get_api_key(), "env-key")
        self.assertEqual(container.corpus.list_documents(), [])

    def test_unknown_component_names_raise(self) -> None:
        with self.assertRaises(ValueError):
            build_default_container(ContainerConfig(corpus="s3", snapshot_store="memory"))  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            build_default_container(ContainerConfig(corpus="memory", snapshot_store="redis"))  # type: ignore[arg-type]


class TestContainerConfig(unittest.TestCase):
    def test_db_path_lives_under_data_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cfg = ContainerConfig(data_root=tmp, db_name="cache.db")
            self.assertEqual(cfg.db_path, Path(tmp) / "cache.db")

    def test_sqlite_store_survives_restart(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cfg = ContainerConfig(vault_root=tmp, data_root=Path(tmp) / ".notethread", max_workers=1)
            Path(tmp, "a.md").write_text("the cat sat", encoding="utf-8")
            Path(tmp, "b.md").write_text("the cat sat on the mat", encoding="utf-8")

            first = build_default_container(cfg, credentials=StaticCredentialProvider())
            first.update_settings(similarity_floor=0.1)
            first.find_similar("a.md")
            first.close()

            second = build_default_container(cfg, credentials=StaticCredentialProvider())
            self.assertEqual(second.settings.similarity_floor, 0.1)
            self.assertEqual(len(second.cache), 2)


if __name__ == "__main__":
    unittest.main()
