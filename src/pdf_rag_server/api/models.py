"""
API Models for the PDF RAG Server

This module defines all Pydantic models used for request/response validation
across upload, search, context and document endpoints.

Field names are snake_case in Python and camelCase on the wire
(`documentId`, `chunkCount`, `topK`, ...).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Literal

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# ---------------------------------------------------------------------
# Mutation Results
# ---------------------------------------------------------------------

class OperationResult(ApiModel):
    """
    Standardized mutation operation result.
    """
    status: Literal["deleted", "ok"]
    count: Optional[int] = Field(default=None, ge=0)


# ---------------------------------------------------------------------
# Upload Models
# ---------------------------------------------------------------------

class UploadResponse(ApiModel):
    """
    Result of a successful PDF upload.
    """
    success: bool = True
    document_id: str
    filename: str
    chunk_count: int = Field(..., ge=0)


# ---------------------------------------------------------------------
# Search Models
# ---------------------------------------------------------------------

class SearchRequest(ApiModel):
    """
    Similarity search within one uploaded document.

    `top_k` above 10 is capped at 10; zero or negative returns no chunks.
    """
    query: str = Field(..., min_length=1)
    document_id: str = Field(..., min_length=1)
    top_k: int = 3


class SearchChunk(ApiModel):
    id: str
    text: str
    similarity: float


class SearchResponse(ApiModel):
    success: bool = True
    query: str
    chunks: List[SearchChunk] = Field(default_factory=list)
    chunk_count: int = Field(..., ge=0)


# ---------------------------------------------------------------------
# RAG Context Models
# ---------------------------------------------------------------------

class ContextRequest(SearchRequest):
    """
    Request for a prompt-ready RAG context.
    """


class ContextChunk(ApiModel):
    text: str
    similarity: float


class ContextResponse(ApiModel):
    """
    Retrieved context plus the formatted prompt fragment.

    When no context is available, `filename` is null, `relevant_chunks` is
    empty and `prompt` is an empty string.
    """
    document_id: str
    filename: Optional[str] = None
    relevant_chunks: List[ContextChunk] = Field(default_factory=list)
    prompt: str = ""


# ---------------------------------------------------------------------
# Document Models
# ---------------------------------------------------------------------

class DocumentSummary(ApiModel):
    """
    Metadata of a stored document, without chunk contents.
    """
    id: str
    filename: str
    chunk_count: int = Field(..., ge=0)
    created_at: datetime
