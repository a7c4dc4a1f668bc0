"""
Core data types for url-digest.

Every entity here lives for exactly one request:
- Article: Title and raw text produced by the extractor
- Chunk: Bounded slice of normalized text
- ScoredSentence: Sentence candidate inside the extractive selection pass
- ChunkSummary: Summary of a single chunk
- SummaryResult: Combined summary of all chunks
- TranslationResult: Summary in the requested language
- DigestRequest / DigestResult: Boundary request and response
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PipelineStage(str, Enum):
    """States a request moves through, in order."""

    FETCHED = "fetched"
    NORMALIZED = "normalized"
    CHUNKED = "chunked"
    PER_CHUNK_SUMMARIZED = "per_chunk_summarized"
    COMBINED = "combined"
    TRANSLATED = "translated"
    DONE = "done"
    ERROR_REPORTED = "error_reported"


@dataclass(frozen=True)
class Article:
    """Extracted article.

    Attributes:
        title: The article headline
        raw_text: Plain text as returned by the extractor, before normalization
    """

    title: str
    raw_text: str


@dataclass
class Chunk:
    index: int
    text: str


@dataclass
class ScoredSentence:
    text: str
    position: int
    score: float


@dataclass
class ChunkSummary:
    """Summary of one chunk and the strategy that produced it."""

    index: int
    text: str
    strategy: str
    deadline_hit: bool = False


@dataclass
class SummaryResult:
    """Summary built from per-chunk summaries.

    Attributes:
        text: The combined summary
        source_chunk_count: Number of chunks the summary was built from
        strategies: Strategy that produced each chunk summary, in chunk order
            ("abstractive", "refined", "extractive", "lead", "deadline_lead")
        recondensed: Whether the joined summaries were condensed again remotely
        deadline_hit: Whether the request deadline cut remote work short
    """

    text: str
    source_chunk_count: int
    strategies: list[str] = field(default_factory=list)
    recondensed: bool = False
    deadline_hit: bool = False


@dataclass
class TranslationResult:
    """Summary translated into the requested language.

    Sub-chunk counters tell how each sub-chunk was handled; a result may mix
    translated and untranslated sub-chunks.
    """

    text: str
    language_code: str
    translated_chunks: int = 0
    fallback_chunks: int = 0
    passthrough_chunks: int = 0


@dataclass
class DigestRequest:
    url: str
    language: str


@dataclass
class DigestResult:
    """Successful pipeline output.

    Attributes:
        title: Article title
        summary: Final (possibly translated) summary
        language: Requested language code
        original_length: Characters of extracted article text
        cleaned_length: Characters after normalization and truncation
        summary_length: Characters of the summary before translation
        translated_length: Characters after translation, None when not translated
        stages: Pipeline stages passed, in order
        meta: Diagnostics that are not part of the response payload
    """

    title: str
    summary: str
    language: str
    original_length: int
    cleaned_length: int
    summary_length: int
    translated_length: int | None = None
    stages: list[PipelineStage] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "summary": self.summary,
            "language": self.language,
            "originalLength": self.original_length,
            "cleanedLength": self.cleaned_length,
            "summaryLength": self.summary_length,
        }
        if self.translated_length is not None:
            payload["translatedLength"] = self.translated_length
        return payload
