import os
import unittest
from pathlib import Path
from unittest import mock

from docrag.config import load_config, redacted_database_url
from docrag.errors import ConfigError


def _load(env):
    with mock.patch.dict(os.environ, env, clear=True), mock.patch("docrag.config.load_dotenv"):
        return load_config(reload=True)


class TestConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = _load({})
        self.assertEqual(cfg.chunk_size, 1500)
        self.assertEqual(cfg.chunk_overlap, 150)
        self.assertEqual(cfg.search_threshold, 0.3)
        self.assertEqual(cfg.max_sources, 3)
        self.assertEqual(cfg.embedding_backend, "sentence_transformers")
        self.assertEqual(cfg.embedding_dimension, 768)
        self.assertEqual(cfg.store_backend, "chroma")
        self.assertEqual(cfg.chroma_collection_name, "documents")
        self.assertFalse(cfg.hard_chunk_limit)
        self.assertEqual(cfg.max_file_size, 10 * 1024 * 1024)

    def test_openai_embedding_defaults(self):
        cfg = _load({"EMBEDDING_BACKEND": "OpenAI", "OPENAI_API_KEY": "sk-test"})
        self.assertEqual(cfg.embedding_backend, "openai")
        self.assertEqual(cfg.embedding_model_name, "text-embedding-3-small")
        self.assertEqual(cfg.embedding_dimension, 1536)
        self.assertEqual(cfg.validate_for_openai(), "sk-test")

    def test_bad_values_fall_back(self):
        cfg = _load({
            "CHUNK_SIZE": "big",
            "SEARCH_THRESHOLD": "high",
            "STORE_BACKEND": "mongo",
            "HARD_CHUNK_LIMIT": "yes",
            "MAX_FILE_SIZE": "2048",
            "CHROMA_PERSIST_DIRECTORY": "/tmp/chroma-test",
        })
        self.assertEqual(cfg.chunk_size, 1500)
        self.assertEqual(cfg.search_threshold, 0.3)
        self.assertEqual(cfg.store_backend, "chroma")
        self.assertTrue(cfg.hard_chunk_limit)
        self.assertEqual(cfg.max_file_size, 2048)
        self.assertEqual(cfg.chroma_persist_directory, Path("/tmp/chroma-test"))

    def test_cached_until_reload(self):
        first = _load({"CHUNK_SIZE": "800"})
        with mock.patch.dict(os.environ, {"CHUNK_SIZE": "900"}):
            self.assertIs(load_config(), first)
        self.assertEqual(_load({"CHUNK_SIZE": "900"}).chunk_size, 900)

    def test_validators(self):
        cfg = _load({})
        with self.assertRaises(ConfigError):
            cfg.validate_for_openai()
        self.assertTrue(cfg.validate_for_pgvector().startswith("postgresql://"))

    def test_redacted_database_url(self):
        self.assertEqual(
            redacted_database_url("postgresql://user:secret@db:5432/rag_db"),
            "postgresql://***@db:5432/rag_db",
        )
        self.assertEqual(redacted_database_url("postgresql://db/rag_db"), "postgresql://db/rag_db")


if __name__ == "__main__":
    unittest.main()
