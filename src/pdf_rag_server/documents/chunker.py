"""
Word-Bounded Text Chunker

Splits extracted document text into chunks bounded by a maximum character
length. Words are never split: a single word longer than the limit becomes a
chunk of its own.
"""

from __future__ import annotations

from typing import List


def chunk_text(
    text: str,
    min_size: int = 700,
    max_size: int = 900,
) -> List[str]:
    """
    Split text into word-bounded chunks of at most `max_size` characters.

    Parameters
    ----------
    text : str
        Raw extracted text. Whitespace runs (including newlines) are
        collapsed to single spaces.

    min_size : int
        Advisory lower bound. Trailing short chunks are not merged into
        their predecessor, so the final chunk may be shorter.

    max_size : int
        Upper bound on chunk length, except for single over-long words.

    Returns
    -------
    List[str]
        Non-empty chunks in text order. Empty for blank input.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be positive; got {max_size}")
    if min_size > max_size:
        raise ValueError(
            f"min_size ({min_size}) must not exceed max_size ({max_size})"
        )

    chunks: List[str] = []
    current = ""

    for word in text.split():
        if current and len(current) + len(word) + 1 > max_size:
            chunks.append(current.strip())
            current = word
        else:
            current = f"{current} {word}" if current else word

    if current:
        chunks.append(current.strip())

    return [c for c in chunks if c]
