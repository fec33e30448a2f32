"""
Documents Package

Provides text chunking, similarity ranking, ingestion and the in-memory
document store.
"""

from .models import Chunk, Document, ScoredChunk, RelevantChunk, RAGContext
from .chunker import chunk_text
from .similarity import DimensionMismatchError, cosine_similarity, find_similar_chunks
from .store import DocumentStore
from .ingest import EmptyDocumentError, ingest_text

__all__ = [
    "Chunk",
    "Document",
    "ScoredChunk",
    "RelevantChunk",
    "RAGContext",
    "chunk_text",
    "DimensionMismatchError",
    "cosine_similarity",
    "find_similar_chunks",
    "DocumentStore",
    "EmptyDocumentError",
    "ingest_text",
]
