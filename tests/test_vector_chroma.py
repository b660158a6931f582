import unittest
from unittest import mock

from docrag.errors import StoreError
from docrag.store.vector_chroma import ChromaVectorStore


def _store_with_collection(col):
    store = ChromaVectorStore(dimension=3)
    store._collection = col
    return store


class TestChromaSearch(unittest.TestCase):
    def _collection(self):
        col = mock.MagicMock()
        col.count.return_value = 3
        col.query.return_value = {
            "ids": [["near", "edge", "mid"]],
            "documents": [["closest text", "edge text", "middle text"]],
            "metadatas": [[{"chunkIndex": 1}, {"chunkIndex": 2}, None]],
            "distances": [[0.25, 0.5, 0.375]],
        }
        return col

    def test_score_is_one_minus_distance(self):
        col = self._collection()
        hits = _store_with_collection(col).search([0.1, 0.2, 0.3], limit=3)

        self.assertEqual([h.id for h in hits], ["near", "mid", "edge"])
        self.assertEqual([h.score for h in hits], [0.75, 0.625, 0.5])
        self.assertEqual(hits[0].text, "closest text")
        self.assertEqual(hits[0].metadata, {"chunkIndex": 1})
        self.assertEqual(hits[1].metadata, {})
        kwargs = col.query.call_args.kwargs
        self.assertEqual(kwargs["n_results"], 3)
        self.assertEqual(kwargs["query_embeddings"], [[0.1, 0.2, 0.3]])

    def test_hit_at_threshold_is_dropped(self):
        hits = _store_with_collection(self._collection()).search([0.1, 0.2, 0.3], limit=3, threshold=0.5)
        self.assertEqual([h.id for h in hits], ["near", "mid"])

    def test_empty_collection_skips_query(self):
        col = mock.MagicMock()
        col.count.return_value = 0
        self.assertEqual(_store_with_collection(col).search([0.0, 1.0, 0.0]), [])
        col.query.assert_not_called()

    def test_client_errors_are_wrapped(self):
        col = mock.MagicMock()
        col.count.side_effect = RuntimeError("server gone")
        with self.assertRaises(StoreError):
            _store_with_collection(col).search([0.0, 1.0, 0.0])

    def test_dimension_checked_on_upsert(self):
        col = mock.MagicMock()
        with self.assertRaises(StoreError):
            _store_with_collection(col).upsert("x", "text", [1.0, 2.0])
        col.upsert.assert_not_called()


class TestChromaListing(unittest.TestCase):
    def setUp(self):
        col = mock.MagicMock()
        col.get.return_value = {
            "ids": ["old", "new", "middle", "undated"],
            "documents": ["old text", "new text", "middle text", "undated text"],
            "metadatas": [
                {"createdAt": "2024-01-01T00:00:00.000Z", "fileType": "text/plain"},
                {"createdAt": "2024-03-01T00:00:00.000Z", "fileType": "application/pdf"},
                {"createdAt": "2024-02-01T00:00:00.000Z"},
                None,
            ],
        }
        self.store = _store_with_collection(col)

    def test_newest_first_with_created_at_split_out(self):
        docs = self.store.list_documents()
        self.assertEqual([d.id for d in docs], ["new", "middle", "old", "undated"])
        self.assertEqual(docs[0].created_at, "2024-03-01T00:00:00.000Z")
        self.assertEqual(docs[0].metadata, {"fileType": "application/pdf"})
        self.assertIsNone(docs[3].created_at)

    def test_limit_and_offset(self):
        docs = self.store.list_documents(limit=2, offset=1)
        self.assertEqual([d.id for d in docs], ["middle", "old"])
        self.assertEqual(self.store.list_documents(limit=5, offset=10), [])


if __name__ == "__main__":
    unittest.main()
