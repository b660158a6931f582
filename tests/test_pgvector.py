import unittest
from unittest import mock

import psycopg2

from docrag.errors import StoreError
from docrag.store.pgvector import PgVectorStore, to_vector_literal


def _store_with_cursor(cur):
    conn = mock.MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    pool = mock.MagicMock()
    pool.getconn.return_value = conn
    store = PgVectorStore("postgresql://u:p@localhost:5433/rag_db", dimension=3)
    store._pool = pool
    return store, conn, pool


class TestPgVectorStore(unittest.TestCase):
    def test_vector_literal(self):
        self.assertEqual(to_vector_literal([1, 0.5, -2]), "[1.0,0.5,-2.0]")

    def test_search_with_threshold(self):
        cur = mock.MagicMock()
        cur.fetchall.return_value = [
            {"id": "a.txt_chunk_1", "content": "Stacks", "metadata": {"chunkIndex": 1}, "similarity": 0.92},
        ]
        store, conn, pool = _store_with_cursor(cur)

        hits = store.search([0.1, 0.2, 0.3], limit=4, threshold=0.3)

        q = "[0.1,0.2,0.3]"
        _, params = cur.execute.call_args[0]
        self.assertEqual(params, [q, q, 0.3, q, 4])
        self.assertEqual(hits[0].id, "a.txt_chunk_1")
        self.assertAlmostEqual(hits[0].score, 0.92)
        self.assertEqual(hits[0].metadata, {"chunkIndex": 1})
        conn.commit.assert_called_once()
        pool.putconn.assert_called_once_with(conn)

    def test_search_without_threshold(self):
        cur = mock.MagicMock()
        cur.fetchall.return_value = []
        store, _, _ = _store_with_cursor(cur)
        self.assertEqual(store.search([0.0, 1.0, 0.0], limit=2), [])
        _, params = cur.execute.call_args[0]
        self.assertEqual(params, ["[0.0,1.0,0.0]", "[0.0,1.0,0.0]", 2])

    def test_errors_roll_back_and_wrap(self):
        cur = mock.MagicMock()
        cur.execute.side_effect = psycopg2.OperationalError("connection lost")
        store, conn, pool = _store_with_cursor(cur)
        with self.assertRaises(StoreError):
            store.delete("x")
        conn.rollback.assert_called_once()
        pool.putconn.assert_called_once_with(conn)

    def test_info_reports_red_when_unreachable(self):
        cur = mock.MagicMock()
        cur.execute.side_effect = psycopg2.OperationalError("connection refused")
        store, _, _ = _store_with_cursor(cur)
        info = store.info()
        self.assertEqual(info.status, "red")
        self.assertEqual(info.points_count, 0)

    def test_dimension_checked_before_query(self):
        store = PgVectorStore("postgresql://localhost/rag_db", dimension=3)
        with self.assertRaises(StoreError):
            store.upsert("x", "text", [1.0, 2.0])
        self.assertEqual(store.delete_many([]), 0)
        self.assertIsNone(store._pool)


if __name__ == "__main__":
    unittest.main()
