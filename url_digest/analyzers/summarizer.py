"""Per-chunk summarization with remote inference and offline fallbacks."""

from __future__ import annotations

import logging
from typing import Any

from ..config import SummaryConfig
from ..errors import PipelineExhaustedError, ProviderError
from ..llm.pacing import RemoteCallPacer
from ..llm.providers.base import InferenceProvider
from ..llm.tracing import set_span_output, start_span
from ..summarize.extractive import lead_sentences, summarize_extractive
from ..text.chunker import chunk
from ..types import Chunk, ChunkSummary, SummaryResult
from ..utils.deadline import Deadline
from ..utils.logging import log_event

ABSTRACTIVE = "abstractive"
REFINED = "refined"
EXTRACTIVE = "extractive"
LEAD = "lead"
DEADLINE_LEAD = "deadline_lead"


class ArticleSummarizer:
    """Summarize normalized article text chunk by chunk.

    Short texts go to the remote model first and fall back to the leading
    sentences of the chunk. Long texts (or ``force_extractive``) are reduced
    by the extractive summarizer over the whole text first; each chunk of
    that reduction may then be refined by one remote call and keeps its
    extractive form when the call fails. Remote failures never escape.
    """

    def __init__(
        self,
        cfg: SummaryConfig,
        inference: InferenceProvider | None,
        model_id: str,
        params: dict[str, Any] | None = None,
        pacer: RemoteCallPacer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cfg = cfg
        self.inference = inference
        self.model_id = model_id
        self.params = params or {}
        self.pacer = pacer or RemoteCallPacer(0)
        self.logger = logger
        self.keywords = cfg.keywords.get(cfg.source_language, [])
        self.prefix_match = cfg.source_language in cfg.prefix_match_languages

    def summarize(self, text: str, deadline: Deadline | None = None) -> SummaryResult:
        chunks = chunk(text, self.cfg.max_chunk_chars)
        pieces = self.summarize_chunks(chunks, deadline)
        return self.combine(pieces, len(chunks), deadline)

    def summarize_chunks(
        self,
        chunks: list[Chunk],
        deadline: Deadline | None = None,
    ) -> list[ChunkSummary]:
        """Produce one summary per unit of work, in order."""
        text = " ".join(c.text for c in chunks)
        if self._abstractive_first(text):
            return [self._summarize_abstractive_first(c, deadline) for c in chunks]

        extractive = summarize_extractive(
            text, self.cfg.target_extractive_sentences, self.keywords, self.prefix_match
        )
        parts = chunk(extractive, self.cfg.max_chunk_chars)
        if self.inference is None or not self.cfg.refine_extractive:
            return [ChunkSummary(index=p.index, text=p.text, strategy=EXTRACTIVE) for p in parts]
        return [self._refine(p, deadline) for p in parts]

    def combine(
        self,
        pieces: list[ChunkSummary],
        source_chunk_count: int,
        deadline: Deadline | None = None,
    ) -> SummaryResult:
        """Join chunk summaries, condensing them once more when still too long.

        Raises:
            PipelineExhaustedError: If no usable summary remains
        """
        joined = " ".join(p.text for p in pieces if p.text).strip()
        deadline_hit = any(p.deadline_hit for p in pieces)
        recondensed = False

        if (
            self.inference is not None
            and len(pieces) > 1
            and len(joined) > self.cfg.recondense_threshold
        ):
            if deadline is not None and deadline.expired():
                deadline_hit = True
            else:
                condensed = self._call(joined, deadline, purpose="recondense")
                if condensed:
                    joined = condensed
                    recondensed = True

        if len(joined) < self.cfg.min_summary_chars:
            raise PipelineExhaustedError(
                "Could not produce a summary",
                details=f"summary has {len(joined)} chars, need {self.cfg.min_summary_chars}",
            )
        return SummaryResult(
            text=joined,
            source_chunk_count=source_chunk_count,
            strategies=[p.strategy for p in pieces],
            recondensed=recondensed,
            deadline_hit=deadline_hit,
        )

    def _abstractive_first(self, text: str) -> bool:
        if self.inference is None or self.cfg.force_extractive:
            return False
        return len(text) < self.cfg.short_text_threshold

    def _summarize_abstractive_first(
        self,
        item: Chunk,
        deadline: Deadline | None,
    ) -> ChunkSummary:
        fallback = lead_sentences(item.text, self.cfg.fallback_sentences)
        if deadline is not None and deadline.expired():
            return self._record(ChunkSummary(item.index, fallback, DEADLINE_LEAD, deadline_hit=True))
        result = self._call(item.text, deadline, purpose="summarize", chunk_index=item.index)
        if result:
            return self._record(ChunkSummary(item.index, result, ABSTRACTIVE))
        return self._record(ChunkSummary(item.index, fallback, LEAD))

    def _refine(self, item: Chunk, deadline: Deadline | None) -> ChunkSummary:
        if deadline is not None and deadline.expired():
            return self._record(ChunkSummary(item.index, item.text, EXTRACTIVE, deadline_hit=True))
        result = self._call(item.text, deadline, purpose="refine", chunk_index=item.index)
        if result:
            return self._record(ChunkSummary(item.index, result, REFINED))
        return self._record(ChunkSummary(item.index, item.text, EXTRACTIVE))

    def _call(self, text: str, deadline: Deadline | None, purpose: str, **fields: Any) -> str:
        """One remote summarization; empty string stands for "no result"."""
        if self.inference is None:
            return ""
        self.pacer.wait()
        with start_span(
            "url_digest.summarize_call",
            kind="chain",
            input_value={"chars": len(text), "purpose": purpose},
        ) as span:
            try:
                result = self.inference.invoke(self.model_id, text, self.params, deadline=deadline)
            except ProviderError as exc:
                log_event(
                    self.logger,
                    "Remote summarization failed",
                    event="summarize_call_failed",
                    purpose=purpose,
                    status_code=exc.status_code,
                    error_kind=exc.kind,
                    error=exc.message,
                    **fields,
                )
                return ""
            result = (result or "").strip()
            set_span_output(span, {"chars": len(result)})
        if len(result) < self.cfg.min_abstractive_chars:
            log_event(
                self.logger,
                "Remote summary too short",
                event="summarize_call_short",
                purpose=purpose,
                chars=len(result),
                **fields,
            )
            return ""
        return result

    def _record(self, summary: ChunkSummary) -> ChunkSummary:
        log_event(
            self.logger,
            "Chunk summarized",
            event="chunk_summarized",
            chunk_index=summary.index,
            strategy=summary.strategy,
            chars=len(summary.text),
        )
        return summary
