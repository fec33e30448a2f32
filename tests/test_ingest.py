import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from pdf_rag_server.documents.ingest import EmptyDocumentError, embed_chunks, ingest_text
from pdf_rag_server.embeddings.embedder import Embedder, EmbeddingError


@pytest.fixture
def embedder():
    mock = AsyncMock(spec=Embedder)
    mock.embed_one.side_effect = lambda text: [float(len(text)), 1.0]
    return mock


@pytest.mark.asyncio
async def test_ingest_chunks_embeds_and_stores(store, embedder):
    text = " ".join(["word"] * 400)

    with patch("pdf_rag_server.documents.ingest.settings") as mock_settings:
        mock_settings.chunk_min_size = 1
        mock_settings.chunk_max_size = 100
        mock_settings.embedding_concurrency = 4
        document = await ingest_text(text, "words.pdf", store=store, embedder=embedder)

    assert store.get_document(document.id) is document
    assert document.filename == "words.pdf"
    assert len(document.chunks) == embedder.embed_one.await_count
    assert " ".join(c.text for c in document.chunks) == text
    assert all(c.embedding == [float(len(c.text)), 1.0] for c in document.chunks)
    assert len({c.id for c in document.chunks}) == len(document.chunks)


@pytest.mark.asyncio
async def test_ingest_uses_explicit_document_id(store, embedder):
    document = await ingest_text(
        "some text", "a.pdf", store=store, embedder=embedder, document_id="fixed"
    )

    assert document.id == "fixed"
    assert "fixed" in store


@pytest.mark.asyncio
async def test_blank_text_rejected(store, embedder):
    with pytest.raises(EmptyDocumentError):
        await ingest_text("  \n ", "blank.pdf", store=store, embedder=embedder)

    assert len(store) == 0
    embedder.embed_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_single_embedding_failure_stores_nothing(store, embedder):
    def _embed(text):
        if text.startswith("boom"):
            raise EmbeddingError("provider down")
        return [1.0, 0.0]

    embedder.embed_one.side_effect = _embed

    with patch("pdf_rag_server.documents.ingest.settings") as mock_settings:
        mock_settings.chunk_min_size = 1
        mock_settings.chunk_max_size = 10
        mock_settings.embedding_concurrency = 8
        with pytest.raises(EmbeddingError):
            await ingest_text(
                "fine text boom here more words",
                "a.pdf",
                store=store,
                embedder=embedder,
            )

    assert len(store) == 0


@pytest.mark.asyncio
async def test_first_failure_cancels_pending_calls(embedder):
    async def _embed(text):
        await asyncio.sleep(0.01)
        if text == "t0":
            raise EmbeddingError("provider down")
        return [1.0]

    embedder.embed_one.side_effect = _embed

    with pytest.raises(EmbeddingError):
        await embed_chunks([f"t{i}" for i in range(40)], embedder, concurrency=2)

    calls_at_failure = embedder.embed_one.await_count
    await asyncio.sleep(0.2)

    assert calls_at_failure < 40
    assert embedder.embed_one.await_count == calls_at_failure


@pytest.mark.asyncio
async def test_inconsistent_dimensions_rejected(embedder):
    embedder.embed_one.side_effect = lambda text: [1.0] * len(text)

    with pytest.raises(EmbeddingError):
        await embed_chunks(["a", "bb"], embedder)


@pytest.mark.asyncio
async def test_embed_chunks_runs_concurrently_within_limit(embedder):
    in_flight = 0
    peak = 0

    async def _embed(text):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return [1.0]

    embedder.embed_one.side_effect = _embed

    chunks = await embed_chunks([f"t{i}" for i in range(10)], embedder, concurrency=3)

    assert [c.text for c in chunks] == [f"t{i}" for i in range(10)]
    assert peak == 3
