import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from pdf_rag_server.documents.ingest import ingest_text
from pdf_rag_server.documents.store import DocumentStore
from pdf_rag_server.embeddings.embedder import Embedder
from pdf_rag_server.extraction.pdf import PDFExtractionError, extract_pdf_text
from pdf_rag_server.rag.context import format_rag_context, get_rag_context


async def main(path: str, query: str | None = None) -> int:
    print(f"Reading {path}...")
    with open(path, "rb") as f:
        data = f.read()

    try:
        text = extract_pdf_text(data)
    except PDFExtractionError as e:
        print(f"Cannot read PDF ({e.kind.value}): {e.details}")
        return 1

    print(f"Extracted {len(text)} characters. Embedding chunks...")
    store = DocumentStore()
    embedder = Embedder()
    document = await ingest_text(
        text,
        os.path.basename(path),
        store=store,
        embedder=embedder,
    )
    print(f"Indexed {document.filename} as {document.id} ({len(document.chunks)} chunks).")

    if query:
        context = await get_rag_context(
            query,
            document.id,
            store=store,
            embedder=embedder,
        )
        prompt = format_rag_context(context)
        print(prompt or "No relevant context found.")

    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: index_pdf.py <file.pdf> [query]")
        sys.exit(2)

    sys.exit(asyncio.run(main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)))
