"""
Cleaning of extracted article text.

Encyclopedia-style pages carry citation markers, edit links and
cross-reference asides that hurt both summarizers. ``normalize`` strips
them, collapses whitespace and trims. It is idempotent.
"""

from __future__ import annotations

import re

# Order matters: numeric citations first so that nested markers such as
# "[a[1]]" reduce to an alphabetic marker the next pattern removes.
_REMOVALS: list[re.Pattern[str]] = [
    # [12], [3,4], [5-7], [8–10]
    re.compile(r"\[\s*\d+(?:\s*[,;\-–—]\s*\d+)*\s*\]"),
    # [a], [b], [note]
    re.compile(r"\[\s*[A-Za-z]+\s*\]"),
    # [citation needed], [cite web ...], [clarification needed], [when?]
    re.compile(
        r"\[\s*(?:citation|cite|clarification|verification|better source|dubious|"
        r"when|who|which|by whom|according to whom)\b[^\]]*\]",
        re.IGNORECASE,
    ),
    # (see ...), (siehe ...), (cf. ...), (vgl. ...)
    re.compile(r"\(\s*(?:see|siehe|cf\.|vgl\.)\s[^)]*\)", re.IGNORECASE),
    # [edit], [Bearbeiten | Quelltext bearbeiten]
    re.compile(r"\[\s*(?:edit|bearbeiten|quelltext bearbeiten)\b[^\]]*\]", re.IGNORECASE),
    re.compile(r"\^"),
    # Link lines at the start of a line; stops at a newline or sentence punctuation
    re.compile(r"^[ \t]*(?:Main articles?|Hauptartikel)[ \t]*:[^\n.!?]*", re.IGNORECASE | re.MULTILINE),
]

_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,!?;:])")


def normalize(raw: str) -> str:
    """Return cleaned text with markers removed and whitespace collapsed.

    The cleaning pass is repeated until the text stops changing, so removing
    one marker can never expose another that survives.
    """
    if not raw:
        return ""
    text = raw
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def _clean_once(text: str) -> str:
    for pattern in _REMOVALS:
        text = pattern.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    return text.strip()


def truncate(text: str, max_chars: int) -> str:
    """Cap text at max_chars characters, dropping trailing whitespace left by the cut."""
    if max_chars < 1:
        raise ValueError("max_chars must be positive")
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip()
