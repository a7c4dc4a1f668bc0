"""
Sentence-boundary chunking of normalized text.

Chunks are built greedily from whole sentences joined by single spaces, so
every chunk fits within ``max_chars``. The only exception to sentence
integrity is a single sentence longer than ``max_chars``: it is hard-split
into ``max_chars``-sized pieces. That cut is lossy in the sense that it can
land mid-word; no characters other than whitespace at the cut are dropped.
"""

from __future__ import annotations

import logging

from ..types import Chunk
from .sentences import split_sentences

logger = logging.getLogger(__name__)


def chunk_text(text: str, max_chars: int) -> list[str]:
    """Split text into ordered chunks of at most max_chars characters.

    Args:
        text: Normalized text to split
        max_chars: Upper bound on chunk length

    Returns:
        Ordered list of non-empty chunks; empty list for empty input

    Raises:
        ValueError: If max_chars is not positive
    """
    if max_chars < 1:
        raise ValueError("max_chars must be positive")
    text = (text or "").strip()
    if not text:
        return []
    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    current = ""
    for sentence in split_sentences(text):
        if len(sentence) > max_chars:
            if current:
                chunks.append(current)
            pieces = _hard_split(sentence, max_chars)
            logger.debug(
                "Hard-split over-long sentence",
                extra={"sentence_chars": len(sentence), "pieces": len(pieces)},
            )
            chunks.extend(pieces[:-1])
            current = pieces[-1] if pieces else ""
            continue

        if not current:
            current = sentence
        elif len(current) + 1 + len(sentence) <= max_chars:
            current = f"{current} {sentence}"
        else:
            chunks.append(current)
            current = sentence

    if current:
        chunks.append(current)
    return chunks


def chunk(text: str, max_chars: int) -> list[Chunk]:
    """Same as chunk_text, with each chunk tagged by its position."""
    return [Chunk(index=i, text=part) for i, part in enumerate(chunk_text(text, max_chars))]


def _hard_split(sentence: str, max_chars: int) -> list[str]:
    pieces = []
    for start in range(0, len(sentence), max_chars):
        piece = sentence[start : start + max_chars].strip()
        if piece:
            pieces.append(piece)
    return pieces
