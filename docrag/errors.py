"""
Exception types raised by DOCRAG.

The chunker never raises; everything here comes from the collaborators
around it (extraction, embedding, storage, generation) or from input
validation at the CLI boundary.
"""

from __future__ import annotations


class DocragError(Exception):
    """Base class for all DOCRAG errors."""


class ConfigError(DocragError, RuntimeError):
    """A required setting is missing or unusable."""


class ValidationError(DocragError, ValueError):
    """Caller input was rejected."""


class ExtractionError(DocragError):
    """A document could not be read or produced no text."""


class UnsupportedFormatError(ExtractionError):
    """The content type has no extractor."""


class EmptyDocumentError(ExtractionError):
    """Extraction succeeded but left nothing to index."""


class EmbeddingError(DocragError):
    """The embedding provider failed."""


class StoreError(DocragError):
    """The vector store failed."""


class GenerationError(DocragError):
    """The language model failed to produce an answer."""
