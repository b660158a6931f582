import unittest

from docrag.errors import ValidationError
from docrag.metadata import (
    ChunkMetadata,
    FileMetadata,
    parse_delete,
    parse_question,
    parse_search,
    parse_upsert,
    utc_now_iso,
    validate_question,
)


class TestSchema(unittest.TestCase):
    def setUp(self):
        self.file_meta = FileMetadata(
            file_type="application/pdf",
            original_size=2048,
            processed_at="2024-05-01T10:00:00.000Z",
            total_chunks=3,
        )

    def test_chunk_metadata_payload(self):
        d = ChunkMetadata.for_chunk(self.file_meta, filename="report.pdf", chunk_index=2).to_dict()
        self.assertEqual(
            list(d),
            ["fileType", "originalSize", "processedAt", "totalChunks", "chunkIndex", "sourceFile", "filename"],
        )
        self.assertEqual(d["chunkIndex"], 2)
        self.assertEqual(d["totalChunks"], 3)
        self.assertEqual(d["sourceFile"], "report.pdf")
        self.assertEqual(d["originalSize"], 2048)

    def test_partial_payload_drops_missing_fields(self):
        meta = ChunkMetadata.from_dict({"filename": "a.txt", "chunkIndex": "4", "originalSize": "n/a"})
        self.assertEqual(meta.chunk_index, 4)
        self.assertIsNone(meta.original_size)
        self.assertEqual(meta.to_dict(), {"chunkIndex": 4, "filename": "a.txt"})
        self.assertEqual(ChunkMetadata.from_dict(None).to_dict(), {})

    def test_timestamp_format(self):
        ts = utc_now_iso()
        self.assertTrue(ts.endswith("Z"))
        self.assertEqual(len(ts), len("2024-05-01T10:00:00.000Z"))


class TestValidation(unittest.TestCase):
    def test_question_bounds(self):
        self.assertEqual(parse_question("  What is RAG?  ").question, "What is RAG?")
        with self.assertRaises(ValidationError) as ctx:
            parse_question("   ")
        self.assertEqual(str(ctx.exception), "question is empty")
        with self.assertRaises(ValidationError):
            parse_question("why")
        with self.assertRaises(ValidationError):
            parse_question("x" * 1001)
        self.assertEqual(len(parse_question("x" * 1000).question), 1000)

    def test_question_max_sources(self):
        self.assertEqual(parse_question("What is RAG?").max_sources, 3)
        with self.assertRaises(ValidationError):
            parse_question("What is RAG?", max_sources=0)

    def test_validate_question(self):
        self.assertEqual(validate_question("What is a vector?"), (True, None))
        ok, reason = validate_question(None)
        self.assertFalse(ok)
        self.assertEqual(reason, "question is empty")

    def test_upsert_requires_id_and_text(self):
        data = parse_upsert(" doc ", " body ")
        self.assertEqual((data.id, data.text), ("doc", "body"))
        with self.assertRaises(ValidationError) as ctx:
            parse_upsert("", "body")
        self.assertEqual(str(ctx.exception), "id is required")
        with self.assertRaises(ValidationError):
            parse_upsert("doc", None)

    def test_search_parameters(self):
        self.assertEqual(parse_search(" vectors ").k, 5)
        with self.assertRaises(ValidationError):
            parse_search("vectors", k=0)
        with self.assertRaises(ValidationError):
            parse_search("  ")

    def test_delete_ids(self):
        self.assertEqual(parse_delete(" a ").ids, ["a"])
        self.assertEqual(parse_delete(["a", "", " b"]).ids, ["a", "b"])
        with self.assertRaises(ValidationError):
            parse_delete([])


if __name__ == "__main__":
    unittest.main()
