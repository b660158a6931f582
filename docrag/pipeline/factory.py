"""
Build a RagPipeline from a Config.

Backends are imported here, inside the branch that needs them, so that
choosing Chroma never imports psycopg2 and choosing OpenAI never loads
torch or llama.cpp.
"""

from __future__ import annotations

from typing import Optional

from docrag.config import Config, load_config
from docrag.embeddings import Embedder
from docrag.generation import ChatRunner
from docrag.logging_config import get_logger
from docrag.store import VectorStore

from .rag import RagPipeline

logger = get_logger(__name__)


def build_embedder(cfg: Config) -> Embedder:
    if cfg.embedding_backend == "openai":
        from docrag.embeddings.openai_embedder import OpenAIEmbedder

        return OpenAIEmbedder(
            api_key=cfg.validate_for_openai(),
            model_name=cfg.embedding_model_name,
            dimension=cfg.embedding_dimension,
        )

    from docrag.embeddings.sentence_transformer import SentenceTransformerEmbedder

    return SentenceTransformerEmbedder(
        model_name=cfg.embedding_model_name,
        dimension=cfg.embedding_dimension,
    )


def build_store(cfg: Config) -> VectorStore:
    if cfg.store_backend == "pgvector":
        from docrag.store.pgvector import PgVectorStore

        return PgVectorStore(cfg.validate_for_pgvector(), dimension=cfg.embedding_dimension)

    from docrag.store.vector_chroma import ChromaVectorStore

    return ChromaVectorStore(
        persist_dir=cfg.chroma_persist_directory,
        collection_name=cfg.chroma_collection_name,
        dimension=cfg.embedding_dimension,
        http_url=cfg.chroma_http_url,
    )


def build_generator(cfg: Config) -> ChatRunner:
    if cfg.llm_backend == "openai":
        from docrag.generation.openai_runner import OpenAIChatRunner

        return OpenAIChatRunner(api_key=cfg.validate_for_openai(), model=cfg.openai_chat_model)

    from docrag.generation.llama_cpp_runner import LlamaCppRunner

    return LlamaCppRunner(str(cfg.validate_for_llm()), n_ctx=cfg.llm_n_ctx)


def build_pipeline(cfg: Optional[Config] = None, *, with_generator: bool = True) -> RagPipeline:
    """
    Construct every collaborator once and wire them into a RagPipeline.

    with_generator=False skips loading the chat model, for commands that
    never ask (init, add, search, list, stats, delete).
    """
    cfg = cfg or load_config()
    logger.info(
        "Pipeline: embeddings=%s (%s, %d dims), store=%s, llm=%s",
        cfg.embedding_backend, cfg.embedding_model_name, cfg.embedding_dimension,
        cfg.store_backend, cfg.llm_backend if with_generator else "off",
    )
    return RagPipeline(
        config=cfg,
        embedder=build_embedder(cfg),
        store=build_store(cfg),
        generator=build_generator(cfg) if with_generator else None,
    )

