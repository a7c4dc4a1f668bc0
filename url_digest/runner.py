"""
Main pipeline orchestration for url-digest.

This module coordinates one request end to end:
1. Validate the request
2. Fetch the page and extract the article
3. Normalize and truncate the article text
4. Chunk and summarize (remote model with offline fallbacks)
5. Combine the chunk summaries
6. Translate into the requested language

Every request is independent: providers hold configuration only, and the
deadline and pacing state are created per request.
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Callable
from urllib.parse import urlparse

from .analyzers.summarizer import ArticleSummarizer
from .analyzers.translator import SummaryTranslator
from .config import AppConfig
from .errors import DigestError, ExtractionError, FetchError, ValidationError
from .fetch.extractor import ExtractedPage, extract_article, is_placeholder_text
from .fetch.fetcher import FetchResult, categorize_error, fetch_page
from .llm.pacing import RemoteCallPacer
from .llm.providers.base import InferenceProvider, TranslationProvider
from .llm.providers.factory import create_inference_provider, create_translation_provider
from .llm.tracing import record_span_error, set_span_output, start_span
from .text.chunker import chunk
from .text.normalize import normalize, truncate
from .types import Article, DigestRequest, DigestResult, PipelineStage
from .utils.deadline import Deadline
from .utils.logging import log_event

_LANGUAGE_RE = re.compile(r"^[A-Za-z]{2,3}(-[A-Za-z0-9]+)?$")

FetchFn = Callable[..., FetchResult]
ExtractFn = Callable[[str, str, str, list[str]], "ExtractedPage | None"]


def validate_request(body: Any) -> DigestRequest:
    """Parse and validate a ``{url, language}`` request body.

    Args:
        body: A mapping, or a JSON document encoding one

    Raises:
        ValidationError: If the body or either field is missing or malformed
    """
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except ValueError as exc:
            raise ValidationError("Request body is not valid JSON", details=str(exc)) from exc
    if not isinstance(body, dict):
        raise ValidationError("Request body must be an object")

    url = body.get("url")
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("Missing url")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("url must be an absolute http(s) URL", details=url)

    language = body.get("language")
    if not isinstance(language, str) or not language.strip():
        raise ValidationError("Missing language")
    language = language.strip()
    if not _LANGUAGE_RE.match(language):
        raise ValidationError("language must be a language code such as 'de' or 'pt-BR'", details=language)
    return DigestRequest(url=url, language=language)


class DigestPipeline:
    """Drive one request through Fetched -> ... -> Done.

    Failures surface as DigestError subclasses tagged with the last stage
    the request reached; provider failures are absorbed by the analyzers.
    """

    def __init__(
        self,
        cfg: AppConfig,
        inference: InferenceProvider | None = None,
        translation: TranslationProvider | None = None,
        fetch: FetchFn = fetch_page,
        extract: ExtractFn = extract_article,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cfg = cfg
        self.inference = inference
        self.translation = translation
        self.fetch = fetch
        self.extract = extract
        self.sleep = sleep
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        logger: logging.Logger | None = None,
        provider_logger: logging.Logger | None = None,
    ) -> "DigestPipeline":
        return cls(
            cfg,
            inference=create_inference_provider(cfg, provider_logger),
            translation=create_translation_provider(cfg),
            logger=logger,
        )

    def run(self, request: DigestRequest) -> DigestResult:
        """Fetch, extract and digest the article behind request.url."""
        deadline = Deadline(self.cfg.pipeline.deadline_seconds, clock=self.clock)
        stages: list[PipelineStage] = []
        with start_span(
            "url_digest.run",
            kind="chain",
            input_value={"url": request.url, "language": request.language},
        ) as run_span:
            log_event(
                self.logger,
                "Pipeline start",
                event="pipeline_start",
                url=request.url,
                language=request.language,
            )
            try:
                article = self.fetch_article(request.url, deadline)
                self._advance(stages, PipelineStage.FETCHED, url=request.url)
                result = self._digest(article, request.language, deadline, stages)
            except DigestError as exc:
                self._report(exc, stages, url=request.url)
                record_span_error(run_span, exc)
                raise
            set_span_output(run_span, result.to_dict())
            return result

    def digest_article(
        self,
        article: Article,
        language: str,
        deadline: Deadline | None = None,
    ) -> DigestResult:
        """Digest already extracted text, skipping the fetch.

        Raises:
            ValidationError: If the article text is too short to summarize
        """
        if len(article.raw_text.strip()) < self.cfg.extract.min_text_chars:
            raise ValidationError(
                "Article text is too short",
                details=f"{len(article.raw_text.strip())} chars, need {self.cfg.extract.min_text_chars}",
            )
        deadline = deadline or Deadline(self.cfg.pipeline.deadline_seconds, clock=self.clock)
        stages: list[PipelineStage] = [PipelineStage.FETCHED]
        try:
            return self._digest(article, language, deadline, stages)
        except DigestError as exc:
            self._report(exc, stages)
            raise

    def fetch_article(self, url: str, deadline: Deadline) -> Article:
        """Fetch url and extract its main article.

        Raises:
            FetchError: If the page could not be retrieved
            ExtractionError: If no usable article text was found
        """
        with start_span("url_digest.fetch_extract", kind="chain", input_value={"url": url}) as span:
            fetched = self.fetch(
                url,
                timeout=deadline.bound(self.cfg.fetch.timeout_seconds),
                user_agent=self.cfg.fetch.user_agent,
                trust_env=self.cfg.fetch.trust_env,
            )
            if not fetched.ok:
                category = categorize_error(fetched.error, fetched.status_code)
                log_event(
                    self.logger,
                    "Fetch failed",
                    event="fetch_failed",
                    url=url,
                    status_code=fetched.status_code,
                    error_category=category,
                )
                if fetched.status_code is not None:
                    message = f"Failed to fetch page (status {fetched.status_code})"
                else:
                    message = f"Failed to fetch page ({category})"
                raise FetchError(
                    message,
                    details=fetched.error,
                    upstream_status=fetched.status_code,
                )

            page = self.extract(
                fetched.text or "",
                url,
                self.cfg.extract.primary,
                self.cfg.extract.fallback,
            )
            text = page.text.strip() if page else ""
            if not text:
                raise ExtractionError("No article content found on page")
            if is_placeholder_text(text):
                raise ExtractionError(
                    "Page did not serve article content",
                    details=text[:200],
                )
            if len(text) < self.cfg.extract.min_text_chars:
                raise ExtractionError(
                    "Article text is too short",
                    details=f"{len(text)} chars, need {self.cfg.extract.min_text_chars}",
                )
            title = (page.title or "").strip() or self.cfg.extract.default_title
            set_span_output(span, {"title": title, "chars": len(text)})
            return Article(title=title, raw_text=text)

    def _digest(
        self,
        article: Article,
        language: str,
        deadline: Deadline,
        stages: list[PipelineStage],
    ) -> DigestResult:
        summary_cfg = self.cfg.summary
        pacer = RemoteCallPacer(
            self.cfg.pipeline.politeness_delay_seconds,
            sleep=self.sleep,
            deadline=deadline,
        )

        cleaned = truncate(normalize(article.raw_text), summary_cfg.max_article_chars)
        self._advance(
            stages,
            PipelineStage.NORMALIZED,
            original_length=len(article.raw_text),
            cleaned_length=len(cleaned),
        )

        chunks = chunk(cleaned, summary_cfg.max_chunk_chars)
        self._advance(stages, PipelineStage.CHUNKED, chunks=len(chunks))

        summarizer = ArticleSummarizer(
            summary_cfg,
            self.inference,
            self.cfg.inference.summarization_model,
            params=self.cfg.inference.summarization_parameters,
            pacer=pacer,
            logger=self.logger,
        )
        with start_span(
            "url_digest.summarize",
            kind="chain",
            input_value={"chunks": len(chunks), "chars": len(cleaned)},
        ) as span:
            pieces = summarizer.summarize_chunks(chunks, deadline)
            self._advance(stages, PipelineStage.PER_CHUNK_SUMMARIZED, pieces=len(pieces))
            summary = summarizer.combine(pieces, len(chunks), deadline)
            set_span_output(span, summary.text)
        self._advance(
            stages,
            PipelineStage.COMBINED,
            summary_length=len(summary.text),
            recondensed=summary.recondensed,
        )

        translator = SummaryTranslator(
            self.cfg.translation,
            summary_cfg.source_language,
            inference=self.inference,
            fallback=self.translation,
            pacer=pacer,
            logger=self.logger,
        )
        final_text = summary.text
        translated_length = None
        translation = None
        if translator.needs_translation(language):
            with start_span(
                "url_digest.translate",
                kind="chain",
                input_value={"language": language, "chars": len(summary.text)},
            ) as span:
                translation = translator.translate(summary.text, language, deadline)
                set_span_output(span, translation.text)
            final_text = translation.text
            translated_length = len(final_text)
            self._advance(stages, PipelineStage.TRANSLATED, translated_length=translated_length)

        self._advance(stages, PipelineStage.DONE)
        meta: dict[str, Any] = {
            "chunks": len(chunks),
            "strategies": summary.strategies,
            "recondensed": summary.recondensed,
            "deadline_hit": summary.deadline_hit or deadline.expired(),
            "remote_calls": pacer.calls,
        }
        if translation is not None:
            meta["translation"] = {
                "translated_chunks": translation.translated_chunks,
                "fallback_chunks": translation.fallback_chunks,
                "passthrough_chunks": translation.passthrough_chunks,
            }
        return DigestResult(
            title=article.title,
            summary=final_text,
            language=language,
            original_length=len(article.raw_text),
            cleaned_length=len(cleaned),
            summary_length=len(summary.text),
            translated_length=translated_length,
            stages=list(stages),
            meta=meta,
        )

    def _advance(self, stages: list[PipelineStage], stage: PipelineStage, **fields: Any) -> None:
        stages.append(stage)
        log_event(self.logger, "Stage complete", event="stage", stage=stage.value, **fields)

    def _report(self, exc: DigestError, stages: list[PipelineStage], **fields: Any) -> None:
        exc.stage = stages[-1] if stages else None
        stages.append(PipelineStage.ERROR_REPORTED)
        log_event(
            self.logger,
            "Pipeline failed",
            event="pipeline_failed",
            error_kind=exc.kind,
            error=exc.message,
            stage=exc.stage.value if exc.stage else None,
            **fields,
        )
