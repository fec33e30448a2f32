"""
Document Ingestion

Turns extracted document text into a stored Document:

1. Chunk the text.
2. Embed every chunk concurrently (one provider call per chunk).
3. Store the embedded chunks under a freshly generated document ID.

Ingestion is all-or-nothing: if any embedding call fails, nothing is stored
and the error propagates to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional
from uuid import uuid4

from ..config import settings
from ..embeddings.embedder import Embedder, EmbeddingError
from .chunker import chunk_text
from .models import Chunk, Document
from .store import DocumentStore

logger = logging.getLogger("pdfrag.ingest")


class EmptyDocumentError(ValueError):
    """Raised when text yields no chunks to embed."""


def new_id() -> str:
    """Return a new opaque identifier for documents and chunks."""
    return uuid4().hex


async def embed_chunks(
    texts: List[str],
    embedder: Embedder,
    concurrency: Optional[int] = None,
) -> List[Chunk]:
    """
    Embed chunk texts concurrently and build Chunk records.

    Parameters
    ----------
    texts : List[str]
        Chunk texts in document order.

    embedder : Embedder
        Embedding provider client.

    concurrency : Optional[int]
        Maximum number of in-flight provider calls.
        Defaults to settings.embedding_concurrency.

    Returns
    -------
    List[Chunk]
        Chunks in the same order as `texts`.

    Raises
    ------
    EmbeddingError
        If any provider call fails, or the returned vectors do not share
        one dimensionality. Pending calls are cancelled on the first failure.
    """
    limit = asyncio.Semaphore(max(1, concurrency or settings.embedding_concurrency))

    async def _embed(text: str) -> List[float]:
        async with limit:
            return await embedder.embed_one(text)

    tasks = [asyncio.ensure_future(_embed(text)) for text in texts]
    try:
        vectors = await asyncio.gather(*tasks)
    except BaseException:
        # First failure aborts the batch: stop every call still queued or in flight
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    dims = {len(v) for v in vectors}
    if len(dims) > 1:
        raise EmbeddingError(
            f"Inconsistent embedding dimensionality: {sorted(dims)}"
        )

    return [
        Chunk(id=new_id(), text=text, embedding=vector)
        for text, vector in zip(texts, vectors)
    ]


async def ingest_text(
    text: str,
    filename: str,
    *,
    store: DocumentStore,
    embedder: Embedder,
    document_id: Optional[str] = None,
) -> Document:
    """
    Chunk, embed and store a document's text.

    Parameters
    ----------
    text : str
        Full extracted text of the document.

    filename : str
        Display name stored with the document.

    store : DocumentStore
        Store receiving the new document.

    embedder : Embedder
        Embedding provider client.

    document_id : Optional[str]
        Explicit ID to store under; a new one is generated when omitted.

    Returns
    -------
    Document
        The stored document.

    Raises
    ------
    EmptyDocumentError
        If the text produces no chunks.

    EmbeddingError
        If embedding fails. The store is left untouched.
    """
    texts = chunk_text(
        text,
        min_size=settings.chunk_min_size,
        max_size=settings.chunk_max_size,
    )
    if not texts:
        raise EmptyDocumentError("No text content to index.")

    logger.info("Embedding %d chunks for %s", len(texts), filename)

    chunks = await embed_chunks(texts, embedder)

    document = store.store_document(document_id or new_id(), filename, chunks)

    logger.info(
        "Stored document %s (%s, %d chunks)",
        document.id,
        document.filename,
        len(document.chunks),
    )
    return document
