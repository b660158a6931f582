"""
Pydantic-based input validation (CLI boundary).

Goals
- Trim strings and reject blank ones.
- Bound question length (5..1000 characters).
- Keep error messages short and human-readable; they are printed as-is.

Usage
- validate_question(question) -> (ok, message)
- parse_question / parse_upsert / parse_search -> validated model
  (raise docrag.errors.ValidationError on bad input)
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from docrag.errors import ValidationError

QUESTION_MIN_CHARS = 5
QUESTION_MAX_CHARS = 1000

_M = TypeVar("_M", bound=BaseModel)


# ---- models ----

class QuestionInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    question: str
    max_sources: int = Field(default=3, ge=1)

    @field_validator("question", mode="before")
    @classmethod
    def _question_present(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("question is empty")
        if len(str(v)) > QUESTION_MAX_CHARS:
            raise ValueError(f"question is too long (max {QUESTION_MAX_CHARS} characters)")
        return v

    @field_validator("question")
    @classmethod
    def _question_length(cls, v: str) -> str:
        if len(v) < QUESTION_MIN_CHARS:
            raise ValueError(f"question is too short (min {QUESTION_MIN_CHARS} characters)")
        return v


class UpsertInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str
    text: str

    @field_validator("id", "text", mode="before")
    @classmethod
    def _not_blank(cls, v, info):
        if v is None or not str(v).strip():
            raise ValueError(f"{info.field_name} is required")
        return v


class SearchInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    query: str
    k: int = Field(default=5, ge=1)

    @field_validator("query", mode="before")
    @classmethod
    def _query_present(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("query is required")
        return v


class DeleteInput(BaseModel):
    ids: List[str]

    @field_validator("ids", mode="before")
    @classmethod
    def _clean_ids(cls, v):
        if isinstance(v, str):
            v = [v]
        ids = [str(x).strip() for x in (v or []) if str(x).strip()]
        if not ids:
            raise ValueError("no document ids given")
        return ids


# ---- helpers ----

def _first_message(err: PydanticValidationError) -> str:
    errors = err.errors()
    if not errors:
        return str(err)
    msg = str(errors[0].get("msg") or "invalid input")
    # pydantic prefixes custom messages with "Value error, "
    return msg.split(", ", 1)[1] if msg.startswith("Value error, ") else msg


def _parse(model: Type[_M], **data) -> _M:
    try:
        return model(**data)
    except PydanticValidationError as e:
        raise ValidationError(_first_message(e)) from e


def parse_question(question: Optional[str], max_sources: int = 3) -> QuestionInput:
    return _parse(QuestionInput, question=question, max_sources=max_sources)


def parse_upsert(doc_id: Optional[str], text: Optional[str]) -> UpsertInput:
    return _parse(UpsertInput, id=doc_id, text=text)


def parse_search(query: Optional[str], k: int = 5) -> SearchInput:
    return _parse(SearchInput, query=query, k=k)


def parse_delete(ids) -> DeleteInput:
    return _parse(DeleteInput, ids=ids)


def validate_question(question: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Return (True, None) for a usable question, else (False, reason)."""
    try:
        parse_question(question)
    except ValidationError as e:
        return False, str(e)
    return True, None
