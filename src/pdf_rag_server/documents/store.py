"""
Document Store

In-memory registry of ingested documents and their embedded chunks.

Design choices
--------------
- In-memory only (no persistence across process restarts).
- Keyed by document ID; storing an existing ID overwrites it.
- Thread-safe access using a re-entrant lock.
- Lookups of unknown IDs return None rather than raising.
- No module-level instance: the application factory constructs one store
  per app and tests construct their own.

A multi-instance deployment does not share documents between instances: an
upload handled by one process is invisible to queries served by another.
"""

from __future__ import annotations

from datetime import datetime, timezone
from threading import RLock
from typing import Dict, List, Optional, Sequence

from .models import Chunk, Document
from .similarity import DimensionMismatchError


class DocumentStore:
    """
    In-memory store mapping document IDs to Document records.
    """

    def __init__(self) -> None:
        self._documents: Dict[str, Document] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def store_document(
        self,
        document_id: str,
        filename: str,
        chunks: Sequence[Chunk],
    ) -> Document:
        """
        Insert or overwrite the document stored under `document_id`.

        Parameters
        ----------
        document_id : str
            Unique identifier, generated by the caller.

        filename : str
            Display name of the source file.

        chunks : Sequence[Chunk]
            Embedded chunks in text order.

        Returns
        -------
        Document
            The stored record, with `created_at` set to the current UTC time.

        Raises
        ------
        DimensionMismatchError
            If the chunk embeddings do not share one dimensionality.
        """
        dims = {len(c.embedding) for c in chunks}
        if len(dims) > 1:
            raise DimensionMismatchError(
                f"Chunks of one document must share a dimensionality, got {sorted(dims)}"
            )

        document = Document(
            id=document_id,
            filename=filename,
            chunks=list(chunks),
            created_at=datetime.now(timezone.utc),
        )

        with self._lock:
            self._documents[document_id] = document

        return document

    def get_document(self, document_id: str) -> Optional[Document]:
        """
        Return the document for `document_id`, or None if unknown.
        """
        with self._lock:
            return self._documents.get(document_id)

    def delete_document(self, document_id: str) -> bool:
        """
        Remove a document and all of its chunks.

        Returns
        -------
        bool
            True if a document existed and was removed.
        """
        with self._lock:
            return self._documents.pop(document_id, None) is not None

    def get_all_documents(self) -> List[Document]:
        """
        Return a snapshot of all stored documents, in no particular order.
        """
        with self._lock:
            return list(self._documents.values())

    # ------------------------------------------------------------------
    # Utility operations
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        """
        Remove every document from the store.
        """
        with self._lock:
            self._documents.clear()

    def __contains__(self, document_id: object) -> bool:
        with self._lock:
            return document_id in self._documents

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)
