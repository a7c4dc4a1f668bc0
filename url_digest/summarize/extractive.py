"""
Offline extractive summarization.

Sentences are scored with cheap positional and lexical heuristics, the best
ones are kept, and the survivors are re-emitted in their original order.
Nothing here performs I/O; the result only depends on the input.
"""

from __future__ import annotations

import re
from typing import Iterable

from ..text.sentences import split_sentences
from ..types import ScoredSentence

# (exclusive upper position, bonus): first 3, next 7, next 10, rest score 0
POSITION_TIERS: tuple[tuple[int, float], ...] = ((3, 3.0), (10, 2.0), (20, 1.0))

IDEAL_LENGTH = (40, 200)
ACCEPTABLE_LENGTH = (20, 300)
IDEAL_LENGTH_BONUS = 2.0
ACCEPTABLE_LENGTH_BONUS = 1.0
SHORT_SENTENCE_CHARS = 20
SHORT_SENTENCE_PENALTY = -2.0
DIGIT_BONUS = 0.5
KEYWORD_BONUS = 0.5

_DIGIT_RE = re.compile(r"\d")


def summarize_extractive(
    text: str,
    target_sentence_count: int,
    keywords: Iterable[str] = (),
    prefix_match: bool = False,
) -> str:
    """Select the most salient sentences of text.

    Args:
        text: Normalized text
        target_sentence_count: Number of sentences to keep
        keywords: Salience keywords for the text's language
        prefix_match: Count keywords that only start a word, for compounding
            languages where "haupt" should score on "Hauptstadt"

    Returns:
        Selected sentences in original order, joined by single spaces.
        Empty only when text contains no sentence.

    Raises:
        ValueError: If target_sentence_count is not positive
    """
    if target_sentence_count < 1:
        raise ValueError("target_sentence_count must be positive")
    sentences = split_sentences(text)
    if len(sentences) <= target_sentence_count:
        return " ".join(sentences)

    scored = score_sentences(sentences, keywords, prefix_match)
    best = sorted(scored, key=lambda s: (-s.score, s.position))[:target_sentence_count]
    best.sort(key=lambda s: s.position)
    return " ".join(s.text for s in best)


def score_sentences(
    sentences: list[str],
    keywords: Iterable[str] = (),
    prefix_match: bool = False,
) -> list[ScoredSentence]:
    """Score each sentence; position in the returned list matches the input."""
    keyword_re = _compile_keywords(keywords, prefix_match)
    return [
        ScoredSentence(text=sentence, position=idx, score=_score(sentence, idx, keyword_re))
        for idx, sentence in enumerate(sentences)
    ]


def lead_sentences(text: str, count: int) -> str:
    """Return the first count sentences of text joined by single spaces."""
    return " ".join(split_sentences(text)[: max(count, 0)])


def _score(sentence: str, position: int, keyword_re: re.Pattern[str] | None) -> float:
    score = 0.0
    for upper, bonus in POSITION_TIERS:
        if position < upper:
            score += bonus
            break

    length = len(sentence)
    if IDEAL_LENGTH[0] <= length <= IDEAL_LENGTH[1]:
        score += IDEAL_LENGTH_BONUS
    elif ACCEPTABLE_LENGTH[0] <= length <= ACCEPTABLE_LENGTH[1]:
        score += ACCEPTABLE_LENGTH_BONUS
    if length < SHORT_SENTENCE_CHARS:
        score += SHORT_SENTENCE_PENALTY

    if _DIGIT_RE.search(sentence):
        score += DIGIT_BONUS

    if keyword_re is not None:
        score += KEYWORD_BONUS * len(keyword_re.findall(sentence))
    return score


def _compile_keywords(keywords: Iterable[str], prefix_match: bool = False) -> re.Pattern[str] | None:
    words = sorted({kw.strip().lower() for kw in keywords if kw and kw.strip()}, key=len, reverse=True)
    if not words:
        return None
    end = "" if prefix_match else r"\b"
    return re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + ")" + end, re.IGNORECASE)
