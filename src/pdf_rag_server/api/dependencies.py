from functools import lru_cache

from fastapi import Request

from ..documents.store import DocumentStore
from ..embeddings.embedder import Embedder


def get_document_store(request: Request) -> DocumentStore:
    # One store per application instance, created by create_app()
    return request.app.state.document_store


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()
