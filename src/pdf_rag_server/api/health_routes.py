from fastapi import APIRouter, Depends

from ..documents.store import DocumentStore
from .dependencies import get_document_store

router = APIRouter(tags=["health"])

@router.get("/health")
def health(store: DocumentStore = Depends(get_document_store)):
    return {"status": "ok", "documents": len(store)}
