"""
DOCRAG CLI

Command-line surface over the RAG pipeline. Every command prints one JSON
object on stdout. Failures print {"action": ..., "error": ...} on stderr.

Exit codes:
  0  success
  1  runtime failure (extraction, embedding, store, model)
  2  bad input (validation errors, unknown content type, missing file)

Commands:

  Setup
  -----
  - init
      Create the collection (Chroma) or extension + table + HNSW index
      (pgvector). Safe to run repeatedly.

  Ingestion
  ---------
  - add <path> [--name N] [--content-type CT] [--remove]
      Extract text (PDF/TXT/MD), chunk it, embed and store every chunk as
      "<name>_chunk_<i>". --remove deletes the file afterwards, the way an
      uploaded temp file is discarded.

  - upsert --id ID --text TEXT
      Embed and store one raw text under ID.

  Query
  -----
  - search "<query>" [--k 5]
      Vector search only, no generation, no threshold.

  - ask "<question>" [--max-sources 3]
      Retrieve chunks above the similarity threshold and answer with the
      configured chat model, citing "Source N".

  Maintenance
  -----------
  - list [--limit 50 --offset 0]
  - stats
  - delete --id ID [ID ...]

Configuration comes from the environment and .env (see docrag.config).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from docrag.config import load_config
from docrag.errors import DocragError, UnsupportedFormatError, ValidationError
from docrag.loaders import infer_content_type, is_supported_content_type
from docrag.logging_config import setup_logging
from docrag.metadata import parse_delete, parse_search, validate_question
from docrag.pipeline import RagPipeline, build_pipeline


# -----------------------------------------------------------------------------
# Small helpers
# -----------------------------------------------------------------------------

def _print(obj: Dict[str, Any]) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def _fail(action: str, err: Exception, **extra: Any) -> int:
    """Print the error object and map it to an exit code."""
    print(json.dumps({"action": action, **extra, "error": str(err)}, ensure_ascii=False), file=sys.stderr)
    if isinstance(err, (ValidationError, UnsupportedFormatError)):
        return 2
    return 1


def _pipeline(*, with_generator: bool = False) -> RagPipeline:
    return build_pipeline(load_config(), with_generator=with_generator)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_init(_args: argparse.Namespace) -> int:
    cfg = load_config()
    try:
        pipe = _pipeline()
        try:
            pipe.init()
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("init", e)
    _print({"action": "init", "store": cfg.store_backend, "dimension": cfg.embedding_dimension})
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """
    Ingest one file: extract → chunk → embed → upsert per chunk.
    Content type comes from --content-type or the file extension.
    """
    path = Path(args.path).expanduser()
    if not path.is_file():
        print(json.dumps({"action": "ingest", "file": str(path), "error": "file not found"}), file=sys.stderr)
        return 2

    content_type = args.content_type or infer_content_type(path)
    if not is_supported_content_type(content_type):
        return _fail("ingest", UnsupportedFormatError(f"Unsupported file type: {content_type or path.suffix}"), file=str(path))

    name = args.name or path.name
    try:
        pipe = _pipeline()
        try:
            res = pipe.ingest_file(path, name, content_type, delete_after=args.remove)
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("ingest", e, file=str(path))

    _print({"action": "ingest", **res.to_dict()})
    return 0


def cmd_upsert(args: argparse.Namespace) -> int:
    try:
        pipe = _pipeline()
        try:
            doc_id = pipe.upsert_text(args.id, args.text)
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("upsert", e)
    _print({"action": "upsert", "id": doc_id})
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    try:
        q = parse_search(args.query, args.k)
        pipe = _pipeline()
        try:
            hits = pipe.search(q.query, limit=q.k)
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("search", e)

    _print({
        "action": "search",
        "query": q.query,
        "k": q.k,
        "results": [{"id": h.id, "score": h.score, "text": h.text, "metadata": h.metadata} for h in hits],
    })
    return 0


def cmd_ask(args: argparse.Namespace) -> int:
    ok, reason = validate_question(args.question)
    if not ok:
        print(json.dumps({"action": "ask", "error": reason}), file=sys.stderr)
        return 2
    try:
        pipe = _pipeline(with_generator=True)
        try:
            res = pipe.ask(args.question, max_sources=args.max_sources)
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("ask", e)

    _print({"action": "ask", **res.to_dict()})
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    try:
        pipe = _pipeline()
        try:
            docs = pipe.list_documents(limit=args.limit, offset=args.offset)
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("list", e)

    _print({
        "action": "list",
        "limit": args.limit,
        "offset": args.offset,
        "count": len(docs),
        "documents": [
            {"id": d.id, "text": d.text, "metadata": d.metadata, "createdAt": d.created_at}
            for d in docs
        ],
    })
    return 0


def cmd_stats(_args: argparse.Namespace) -> int:
    try:
        pipe = _pipeline()
        try:
            s = pipe.stats()
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("stats", e)
    _print({"action": "stats", **s})
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    try:
        ids = parse_delete(args.id).ids
        pipe = _pipeline()
        try:
            if len(ids) == 1:
                pipe.delete_document(ids[0])
                n = 1
            else:
                n = pipe.delete_documents(ids)
        finally:
            pipe.close()
    except DocragError as e:
        return _fail("delete", e)
    _print({"action": "delete", "deleted": n, "ids": ids})
    return 0


# -----------------------------------------------------------------------------
# Argument parser construction
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Define CLI structure, flags and defaults.
    Each subparser sets .set_defaults(func=...), which is called by main().
    """
    p = argparse.ArgumentParser(prog="docrag", description="DOCRAG CLI")
    p.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
    sub = p.add_subparsers(dest="command", required=True)

    # --- init ---
    pi = sub.add_parser("init", help="Create the collection/table and vector index")
    pi.set_defaults(func=cmd_init)

    # --- add ---
    pa = sub.add_parser("add", help="Ingest a PDF, text or Markdown file")
    pa.add_argument("path", help="Path to the document to ingest")
    pa.add_argument("--name", type=str, help="Name used in chunk ids (default: file name)")
    pa.add_argument("--content-type", type=str, help="MIME type (inferred from the extension by default)")
    pa.add_argument("--remove", action="store_true", help="Delete the file after processing")
    pa.set_defaults(func=cmd_add)

    # --- upsert ---
    pu = sub.add_parser("upsert", help="Store one raw text under an id")
    pu.add_argument("--id", required=True, help="Document id")
    pu.add_argument("--text", required=True, help="Document text")
    pu.set_defaults(func=cmd_upsert)

    # --- search ---
    psr = sub.add_parser("search", help="Vector search (no generation)")
    psr.add_argument("query", help="Search text (use quotes)")
    psr.add_argument("--k", type=int, default=5, help="Number of results")
    psr.set_defaults(func=cmd_search)

    # --- ask ---
    pq = sub.add_parser("ask", help="Answer a question from the stored documents")
    pq.add_argument("question", help="The question (use quotes)")
    pq.add_argument("--max-sources", type=int, default=None, help="Max chunks given to the model (default: MAX_SOURCES)")
    pq.set_defaults(func=cmd_ask)

    # --- list ---
    pl = sub.add_parser("list", help="List stored chunks, newest first")
    pl.add_argument("--limit", type=int, default=50, help="Max items")
    pl.add_argument("--offset", type=int, default=0, help="Offset for paging")
    pl.set_defaults(func=cmd_list)

    # --- stats ---
    ps = sub.add_parser("stats", help="Collection health and per-file-type counts")
    ps.set_defaults(func=cmd_stats)

    # --- delete ---
    pdel = sub.add_parser("delete", help="Delete one or more stored chunks by id")
    pdel.add_argument("--id", nargs="+", required=True, help="One or more ids")
    pdel.set_defaults(func=cmd_delete)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    """
    Entrypoint:
      - Parse CLI args
      - Configure logging (stderr)
      - Dispatch to subcommand handler and return its exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or load_config().log_level)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
