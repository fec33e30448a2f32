"""
Global Error Handling

This module defines the application's error types for request validation and
the exception handlers that turn every failure into a JSON error body.

Design Goals
------------
- Never leak internal exception details to clients
- Always return machine-readable `{"error": ..., "details": ...}` bodies
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from ..embeddings.embedder import EmbeddingError
from ..extraction.pdf import PDFExtractionError

logger = logging.getLogger("pdfrag.errors")

UNREADABLE_PDF_MESSAGE = "This PDF cannot be read. Please upload a text-based PDF."


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class UploadValidationError(ValueError):
    """Raised when an upload is rejected before any processing."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def error_payload(error: str, details: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": error}
    if details:
        payload["details"] = details
    return payload


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def http_exception_handler(
    request: Request,
    exc: HTTPException,
) -> JSONResponse:
    """
    Render HTTPException as `{"error": detail}`.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Report malformed request bodies as 400 with the first validation problem.
    """
    errors = exc.errors()
    details = None
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        details = f"{location}: {first.get('msg')}" if location else first.get("msg")

    return JSONResponse(
        status_code=400,
        content=error_payload("Invalid request", details),
    )


async def upload_validation_handler(
    request: Request,
    exc: UploadValidationError,
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_payload(exc.message, exc.details),
    )


async def extraction_error_handler(
    request: Request,
    exc: PDFExtractionError,
) -> JSONResponse:
    """
    Report unreadable PDFs as 400 with a kind-specific `details` message.
    """
    logger.info(
        "Rejected unreadable PDF on %s (%s)",
        request.url.path,
        exc.kind.value,
    )
    return JSONResponse(
        status_code=400,
        content=error_payload(UNREADABLE_PDF_MESSAGE, exc.details),
    )


async def embedding_error_handler(
    request: Request,
    exc: EmbeddingError,
) -> JSONResponse:
    """
    Report embedding provider failures as 502.
    """
    logger.error(
        "Embedding provider failure during request: %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )
    return JSONResponse(
        status_code=502,
        content=error_payload("Embedding provider unavailable. Please try again later."),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full exception stack trace and returns a generic 500 error to
    the client with no internal details.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(UploadValidationError, upload_validation_handler)
    app.add_exception_handler(PDFExtractionError, extraction_error_handler)
    app.add_exception_handler(EmbeddingError, embedding_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
