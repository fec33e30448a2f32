import pytest

from pdf_rag_server.documents.chunker import chunk_text


LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod\n"
    "tempor incididunt ut labore et dolore magna aliqua.\n\n   Ut enim ad minim "
    "veniam, quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea "
    "commodo consequat.\tDuis aute irure dolor in reprehenderit in voluptate "
)


def test_empty_and_blank_input():
    assert chunk_text("") == []
    assert chunk_text("   ") == []
    assert chunk_text("\n\t  \n") == []


def test_short_text_is_single_normalized_chunk():
    assert chunk_text("  hello \n\n  world  ") == ["hello world"]


def test_chunks_rejoin_to_normalized_text():
    text = LOREM * 40
    chunks = chunk_text(text)

    assert len(chunks) > 1
    assert " ".join(chunks) == " ".join(text.split())


def test_chunks_respect_max_size():
    text = LOREM * 40
    for max_size in (20, 100, 900):
        chunks = chunk_text(text, min_size=1, max_size=max_size)
        assert all(len(c) <= max_size for c in chunks)
        assert all(c for c in chunks)


def test_chunks_fill_up_to_max_size():
    # Every flush happens because the next word would not fit
    words = ["abcd"] * 10
    chunks = chunk_text(" ".join(words), min_size=1, max_size=14)
    assert chunks == ["abcd abcd abcd"] * 3 + ["abcd"]


def test_overlong_word_kept_whole():
    long_word = "x" * 50
    chunks = chunk_text(f"short {long_word} tail", min_size=1, max_size=10)
    assert chunks == ["short", long_word, "tail"]


def test_trailing_short_chunk_not_merged():
    chunks = chunk_text("aaaa bbbb cccc d", min_size=8, max_size=9)
    assert chunks == ["aaaa bbbb", "cccc d"]


def test_invalid_bounds_rejected():
    with pytest.raises(ValueError):
        chunk_text("text", max_size=0)
    with pytest.raises(ValueError):
        chunk_text("text", min_size=10, max_size=5)
