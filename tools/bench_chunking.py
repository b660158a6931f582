"""
Quick chunking benchmark (extraction + chunk_text, no embedding or store).

Examples:
    python -m tools.bench_chunking ./data/*.pdf
    python -m tools.bench_chunking --chunk-size 800 --overlap 80 --repeat 3 notes.md
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import List

from docrag.chunking import chunk_stats, chunk_text
from docrag.errors import ExtractionError
from docrag.loaders import extract_text, infer_content_type


def run(paths: List[str], *, chunk_size: int, overlap: int, repeat: int = 1) -> None:
    files: List[Path] = []
    for p in paths:
        if any(ch in p for ch in "*?[]"):
            files.extend(Path(".").glob(p))
        else:
            files.append(Path(p))
    files = [f.resolve() for f in files if f.exists() and infer_content_type(f)]
    if not files:
        print("No supported files found.")
        return

    texts = []
    for f in files:
        try:
            texts.append((f.name, extract_text(f, infer_content_type(f))))
        except ExtractionError as e:
            print(f"skip {f.name}: {e}")

    total_chars = sum(len(t) for _, t in texts)
    t0 = time.perf_counter()
    for _ in range(repeat):
        for _name, text in texts:
            chunk_text(text, chunk_size, overlap)
    dt = time.perf_counter() - t0

    for name, text in texts:
        s = chunk_stats(chunk_text(text, chunk_size, overlap))
        print(f"{name}: {len(text)} chars -> {s['count']} chunks (avg {s['avg_chars']}, max {s['max_chars']})")
    mbps = (total_chars * repeat / 1e6) / dt if dt > 0 else 0.0
    print(f"Chunked {total_chars * repeat} chars in {dt:.3f}s  ->  {mbps:.2f} M chars/sec")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("paths", nargs="+", help="Files or globs")
    ap.add_argument("--chunk-size", type=int, default=1500, help="Max chunk size in characters")
    ap.add_argument("--overlap", type=int, default=150, help="Overlap in characters")
    ap.add_argument("--repeat", type=int, default=1, help="Repeat count")
    args = ap.parse_args(argv)

    run(args.paths, chunk_size=args.chunk_size, overlap=args.overlap, repeat=int(args.repeat))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
