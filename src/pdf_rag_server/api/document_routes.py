"""
Document Routes

This module exposes endpoints for:
- Uploading a PDF (extract, chunk, embed, store)
- Listing stored documents
- Inspecting and deleting a single document

Stored documents live in process memory only and are lost on restart.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from .models import DocumentSummary, OperationResult, UploadResponse
from .dependencies import get_document_store, get_embedder
from ..auth.security import require_scopes
from ..auth.models import UserContext
from ..config import settings
from ..core.errors import UNREADABLE_PDF_MESSAGE, UploadValidationError
from ..documents.ingest import EmptyDocumentError, ingest_text
from ..documents.models import Document
from ..documents.store import DocumentStore
from ..embeddings.embedder import Embedder, EmbeddingError
from ..extraction.pdf import extract_pdf_text

logger = logging.getLogger("pdfrag.api.documents")

router = APIRouter(prefix="/pdf", tags=["documents"])


# ---------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------

def _summarize(document: Document) -> DocumentSummary:
    return DocumentSummary(
        id=document.id,
        filename=document.filename,
        chunk_count=len(document.chunks),
        created_at=document.created_at,
    )


async def _read_upload(file: Optional[UploadFile]) -> bytes:
    """
    Validate an uploaded file and return its bytes.

    Raises
    ------
    UploadValidationError
        If the file is missing, not a PDF, empty, or too large.
    """
    if file is None:
        raise UploadValidationError("No file provided")

    if not file.content_type or "pdf" not in file.content_type.lower():
        raise UploadValidationError("Only PDF files are allowed")

    limit = settings.max_upload_bytes
    data = await file.read(limit + 1)

    if len(data) > limit:
        raise UploadValidationError(
            "File is too large",
            f"Maximum upload size is {limit // (1024 * 1024)} MB.",
        )

    if not data:
        raise UploadValidationError("Uploaded file is empty")

    return data


# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------

@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload and index a PDF document",
)
async def upload_pdf(
    user: Annotated[UserContext, Depends(require_scopes("documents"))],
    store: Annotated[DocumentStore, Depends(get_document_store)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
    file: Annotated[Optional[UploadFile], File()] = None,
) -> UploadResponse:
    """
    Upload a PDF and index it for retrieval.

    Workflow
    --------
    1. Validate the upload (presence, MIME type, size).
    2. Extract text (worker thread; pypdf is blocking).
    3. Chunk the text and embed all chunks concurrently.
    4. Store the document under a new ID.
    """
    data = await _read_upload(file)
    filename = file.filename or "document.pdf"

    # PDFExtractionError is rendered as 400 by the registered handler
    text = await run_in_threadpool(extract_pdf_text, data)

    try:
        document = await ingest_text(text, filename, store=store, embedder=embedder)
    except EmptyDocumentError:
        raise UploadValidationError(
            UNREADABLE_PDF_MESSAGE,
            "Failed to extract meaningful content from the PDF.",
        )
    except EmbeddingError as exc:
        logger.error("PDF upload failed while embedding %s: %s", filename, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to process PDF. Please try again later.",
        ) from exc

    logger.info(
        "User %s uploaded %s as %s (%d chunks)",
        user.username,
        filename,
        document.id,
        len(document.chunks),
    )

    return UploadResponse(
        document_id=document.id,
        filename=document.filename,
        chunk_count=len(document.chunks),
    )


@router.get(
    "/documents",
    response_model=List[DocumentSummary],
    summary="List stored documents",
)
async def list_documents(
    user: Annotated[UserContext, Depends(require_scopes("documents"))],
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> List[DocumentSummary]:
    return [_summarize(d) for d in store.get_all_documents()]


@router.get(
    "/documents/{document_id}",
    response_model=DocumentSummary,
    summary="Get a stored document's metadata",
)
async def get_document(
    document_id: str,
    user: Annotated[UserContext, Depends(require_scopes("documents"))],
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> DocumentSummary:
    document = store.get_document(document_id)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )
    return _summarize(document)


@router.delete(
    "/documents/{document_id}",
    response_model=OperationResult,
    summary="Delete a stored document",
)
async def delete_document(
    document_id: str,
    user: Annotated[UserContext, Depends(require_scopes("documents"))],
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> OperationResult:
    """
    Delete a document and all of its chunks.
    """
    document = store.get_document(document_id)
    if document is None or not store.delete_document(document_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )

    return OperationResult(status="deleted", count=len(document.chunks))
