"""
Document Data Models

This module defines the canonical in-memory records for ingested documents
and the transient retrieval results built from them.

Each Chunk corresponds to ONE embedding vector and ONE span of document text.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


class Chunk(BaseModel):
    """
    A single embedded span of document text.

    Chunks are created during ingestion and never mutated afterwards.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier for this chunk.",
    )

    text: str = Field(
        ...,
        min_length=1,
        description="Raw text content for this embedded chunk.",
    )

    embedding: List[float] = Field(
        ...,
        description="Embedding vector produced by the configured model.",
    )

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )


class Document(BaseModel):
    """
    An ingested document and its ordered chunks.

    Chunk order matches the order of the text in the source document.
    """

    id: str = Field(..., min_length=1)
    filename: str = Field(..., description="Display name of the uploaded file.")
    chunks: List[Chunk] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    @property
    def embedding_dim(self) -> Optional[int]:
        """Dimensionality shared by all chunks, or None for an empty document."""
        if not self.chunks:
            return None
        return len(self.chunks[0].embedding)


class ScoredChunk(BaseModel):
    """
    A chunk ranked against a query vector.
    """

    id: str
    text: str
    similarity: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class RelevantChunk(BaseModel):
    text: str
    similarity: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class RAGContext(BaseModel):
    """
    Retrieval result for one query against one document.

    Constructed per query and discarded after use; never stored.
    """

    document_id: str
    filename: str
    relevant_chunks: List[RelevantChunk] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)
