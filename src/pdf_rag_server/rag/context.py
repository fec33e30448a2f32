"""
RAG Context Builder

Retrieves the chunks of a stored document that are most relevant to a query
and formats them for injection into a language model's system prompt.

Retrieval never raises: an unknown document, an empty document, or a failed
embedding call all yield None so that the surrounding conversation can
continue without document context.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..config import settings
from ..documents.models import RAGContext, RelevantChunk
from ..documents.similarity import find_similar_chunks
from ..documents.store import DocumentStore
from ..embeddings.embedder import Embedder

logger = logging.getLogger("pdfrag.rag")

MAX_TOP_K = 10


async def get_rag_context(
    query: str,
    document_id: str,
    *,
    store: DocumentStore,
    embedder: Embedder,
    top_k: int = 3,
    timeout: Optional[float] = None,
) -> Optional[RAGContext]:
    """
    Build the retrieval context for a query against one document.

    Parameters
    ----------
    query : str
        User query text.

    document_id : str
        ID of a document in `store`.

    store : DocumentStore
        Store holding the document.

    embedder : Embedder
        Embedding provider used for the query.

    top_k : int
        Number of chunks to return, capped at MAX_TOP_K.

    timeout : Optional[float]
        Bound on the query embedding call, in seconds.
        Defaults to settings.embedding_timeout.

    Returns
    -------
    Optional[RAGContext]
        Ranked chunks, or None when no context is available.
    """
    document = store.get_document(document_id)

    if document is None:
        logger.warning(
            "RAG: document %s not found (%d documents stored)",
            document_id,
            len(store),
        )
        return None

    if not document.chunks:
        logger.warning("RAG: document %s has no chunks", document_id)
        return None

    limit = settings.embedding_timeout if timeout is None else timeout

    try:
        query_vector = await asyncio.wait_for(embedder.embed_one(query), timeout=limit)
        ranked = find_similar_chunks(
            query_vector,
            document.chunks,
            min(top_k, MAX_TOP_K),
        )
    except Exception:
        logger.exception("RAG: failed to retrieve context for %s", document_id)
        return None

    logger.info(
        "RAG: %d chunks selected from %s for query %r",
        len(ranked),
        document.filename,
        query[:50],
    )

    return RAGContext(
        document_id=document_id,
        filename=document.filename,
        relevant_chunks=[
            RelevantChunk(text=chunk.text, similarity=chunk.similarity)
            for chunk in ranked
        ],
    )


def format_rag_context(context: Optional[RAGContext]) -> str:
    """
    Render a RAG context as a system-prompt fragment.

    Returns an empty string when there is nothing to inject.
    """
    if context is None or not context.relevant_chunks:
        return ""

    context_text = "\n\n".join(chunk.text for chunk in context.relevant_chunks)

    return (
        f'Use the following PDF context (from "{context.filename}") '
        "to answer the user's question accurately:\n"
        "\n"
        "<pdf_context>\n"
        f"{context_text}\n"
        "</pdf_context>\n"
        "\n"
    )
