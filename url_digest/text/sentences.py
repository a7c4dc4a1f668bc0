"""Sentence segmentation shared by the chunker and the extractive summarizer."""

from __future__ import annotations

import re

# A unit runs up to and including a run of terminal punctuation plus any
# closing quotes/brackets; text after the last terminator forms a final unit.
_UNIT_RE = re.compile(r"[^.!?]*[.!?]+[\"'”’»)\]]*|[^.!?]+$")


def split_units(text: str) -> list[str]:
    """Split text into sentence-like units without dropping any character.

    ``"".join(split_units(text)) == text`` always holds.
    """
    if not text:
        return []
    return _UNIT_RE.findall(text)


def split_sentences(text: str) -> list[str]:
    """Split text into stripped, non-empty sentences."""
    sentences = []
    for unit in split_units(text):
        stripped = unit.strip()
        if stripped:
            sentences.append(stripped)
    return sentences
