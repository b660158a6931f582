from .schema import (
    FileMetadata,
    ChunkMetadata,
    utc_now_iso,
)
from .validation import (
    QuestionInput,
    UpsertInput,
    SearchInput,
    DeleteInput,
    parse_question,
    parse_upsert,
    parse_search,
    parse_delete,
    validate_question,
)

__all__ = [
    "FileMetadata",
    "ChunkMetadata",
    "utc_now_iso",
    "QuestionInput",
    "UpsertInput",
    "SearchInput",
    "DeleteInput",
    "parse_question",
    "parse_upsert",
    "parse_search",
    "parse_delete",
    "validate_question",
]
