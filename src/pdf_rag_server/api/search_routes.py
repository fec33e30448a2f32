"""
Search Routes

This module defines similarity search endpoints over a single uploaded
document:

- /pdf/search returns the ranked chunks and reports unknown documents as 404.
- /pdf/context returns the RAG context plus the formatted prompt fragment and
  degrades to an empty context instead of failing, for use by chat flows.
"""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from .models import (
    ContextChunk,
    ContextRequest,
    ContextResponse,
    SearchChunk,
    SearchRequest,
    SearchResponse,
)
from .dependencies import get_document_store, get_embedder
from ..auth.security import require_scopes
from ..auth.models import UserContext
from ..config import settings
from ..documents.similarity import find_similar_chunks
from ..documents.store import DocumentStore
from ..embeddings.embedder import Embedder, EmbeddingError
from ..rag.context import MAX_TOP_K, format_rag_context, get_rag_context

router = APIRouter(prefix="/pdf", tags=["search"])


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Similarity search within a document",
    status_code=status.HTTP_200_OK,
)
async def search(
    req: SearchRequest,
    user: Annotated[UserContext, Depends(require_scopes("documents"))],
    store: Annotated[DocumentStore, Depends(get_document_store)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
) -> SearchResponse:
    """
    Rank a document's chunks against a query.

    Parameters
    ----------
    req : SearchRequest
        Contains:
        - query: Search query string
        - document_id: Target document
        - top_k: Number of chunks to return (capped at 10)

    Returns
    -------
    SearchResponse
        Ranked chunks with similarity scores.
    """
    document = store.get_document(req.document_id)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )

    try:
        query_vector = await asyncio.wait_for(
            embedder.embed_one(req.query),
            timeout=settings.embedding_timeout,
        )
    except asyncio.TimeoutError as exc:
        raise EmbeddingError("Query embedding timed out.") from exc

    # DimensionMismatchError falls through to the 500 handler: it means the
    # document was embedded with a different model.
    ranked = find_similar_chunks(
        query_vector,
        document.chunks,
        min(req.top_k, MAX_TOP_K),
    )

    return SearchResponse(
        query=req.query,
        chunks=[
            SearchChunk(id=c.id, text=c.text, similarity=c.similarity)
            for c in ranked
        ],
        chunk_count=len(ranked),
    )


@router.post(
    "/context",
    response_model=ContextResponse,
    summary="Build a prompt-ready RAG context",
)
async def rag_context(
    req: ContextRequest,
    user: Annotated[UserContext, Depends(require_scopes("documents"))],
    store: Annotated[DocumentStore, Depends(get_document_store)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
) -> ContextResponse:
    """
    Return the most relevant chunks and the system-prompt fragment built
    from them. An unavailable context yields an empty response, never an error.
    """
    context = await get_rag_context(
        req.query,
        req.document_id,
        store=store,
        embedder=embedder,
        top_k=req.top_k,
    )

    if context is None:
        return ContextResponse(document_id=req.document_id)

    return ContextResponse(
        document_id=context.document_id,
        filename=context.filename,
        relevant_chunks=[
            ContextChunk(text=c.text, similarity=c.similarity)
            for c in context.relevant_chunks
        ],
        prompt=format_rag_context(context),
    )
