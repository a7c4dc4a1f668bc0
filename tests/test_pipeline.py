"""End-to-end tests for the digest pipeline with injected collaborators."""

from __future__ import annotations

import pytest

from url_digest.config import AppConfig
from url_digest.errors import ExtractionError, FetchError, ProviderTransientError, ValidationError
from url_digest.fetch.extractor import ExtractedPage
from url_digest.fetch.fetcher import FetchResult
from url_digest.llm.providers.base import InferenceProvider, TranslationProvider
from url_digest.runner import DigestPipeline, validate_request
from url_digest.summarize.extractive import summarize_extractive
from url_digest.text.chunker import chunk_text
from url_digest.text.normalize import normalize, truncate
from url_digest.text.sentences import split_sentences
from url_digest.types import Article, DigestRequest, PipelineStage
from url_digest.utils.deadline import Deadline


class _FailingInference(InferenceProvider):
    """Stands in for an unreachable inference service."""

    def __init__(self):
        self.calls = 0

    def invoke(self, model_id, text, params=None, deadline=None):  # noqa: ANN001
        self.calls += 1
        raise ProviderTransientError(502, "network unreachable")


class _DummyTranslation(TranslationProvider):
    def __init__(self):
        self.calls = 0

    def translate(self, text, source, target, deadline=None):  # noqa: ANN001
        self.calls += 1
        return f"[{target}] {text}"


def _sentences(count: int) -> list[str]:
    return [
        f"Paragraph {i} of the report explains one more aspect of the situation in some detail."
        for i in range(count)
    ]


def _fetch_returning(html: str, status: int = 200, error: str | None = None):
    def fetch(url, timeout, user_agent, trust_env=True):  # noqa: ANN001
        return FetchResult(url=url, status_code=status, text=html, error=error)

    return fetch


def _extract_returning(page: ExtractedPage | None):
    def extract(html, base_url, primary, fallback):  # noqa: ANN001
        return page

    return extract


def _offline_cfg() -> AppConfig:
    cfg = AppConfig()
    cfg.summary.target_extractive_sentences = 10
    return cfg


def test_scenario_offline_extractive_summary_keeps_ten_sentences_in_order():
    sentences = _sentences(25)
    pipeline = DigestPipeline(_offline_cfg(), sleep=lambda s: None)

    result = pipeline.digest_article(Article(title="Report", raw_text=" ".join(sentences)), "en")

    picked = split_sentences(result.summary)
    assert len(picked) == 10
    positions = [sentences.index(s) for s in picked]
    assert positions == sorted(positions)
    assert positions[:3] == [0, 1, 2]
    assert result.translated_length is None
    assert "translatedLength" not in result.to_dict()


def test_scenario_network_failure_falls_back_to_extractive_summary():
    sentences = _sentences(25)
    text = " ".join(sentences)
    cfg = _offline_cfg()
    cfg.summary.short_text_threshold = 1000
    inference = _FailingInference()
    pipeline = DigestPipeline(cfg, inference=inference, sleep=lambda s: None)

    result = pipeline.digest_article(Article(title="Report", raw_text=text), "en")

    assert result.summary == summarize_extractive(text, 10, cfg.summary.keywords["en"])
    assert len(split_sentences(result.summary)) == 10
    assert inference.calls >= 1


def test_scenario_long_article_is_truncated_before_chunking():
    raw = "This sentence is part of a very long article body. " * 9804
    assert len(raw) >= 500000
    cfg = AppConfig()
    pipeline = DigestPipeline(cfg, sleep=lambda s: None)

    result = pipeline.digest_article(Article(title="Long", raw_text=raw), "en")

    cleaned = truncate(normalize(raw), cfg.summary.max_article_chars)
    chunks = chunk_text(cleaned, cfg.summary.max_chunk_chars)
    assert result.original_length == len(raw)
    assert result.cleaned_length == len(cleaned)
    assert result.cleaned_length <= cfg.summary.max_article_chars
    assert result.meta["chunks"] == len(chunks)
    assert len(chunks) * cfg.summary.max_chunk_chars >= result.cleaned_length


def test_run_records_stages_and_uses_default_title():
    sentences = _sentences(12)
    pipeline = DigestPipeline(
        _offline_cfg(),
        fetch=_fetch_returning("<html></html>"),
        extract=_extract_returning(ExtractedPage(title="", text=" ".join(sentences))),
        sleep=lambda s: None,
    )

    result = pipeline.run(DigestRequest(url="https://example.com/a", language="en"))

    assert result.title == "Untitled"
    assert result.stages == [
        PipelineStage.FETCHED,
        PipelineStage.NORMALIZED,
        PipelineStage.CHUNKED,
        PipelineStage.PER_CHUNK_SUMMARIZED,
        PipelineStage.COMBINED,
        PipelineStage.DONE,
    ]
    payload = result.to_dict()
    assert set(payload) == {
        "title",
        "summary",
        "language",
        "originalLength",
        "cleanedLength",
        "summaryLength",
    }


def test_run_translates_with_generic_provider():
    sentences = _sentences(12)
    translation = _DummyTranslation()
    pipeline = DigestPipeline(
        _offline_cfg(),
        translation=translation,
        fetch=_fetch_returning("<html></html>"),
        extract=_extract_returning(ExtractedPage(title="Title", text=" ".join(sentences))),
        sleep=lambda s: None,
    )

    result = pipeline.run(DigestRequest(url="https://example.com/a", language="de"))

    assert translation.calls >= 1
    assert result.summary.startswith("[de] ")
    assert result.translated_length == len(result.summary)
    assert result.to_dict()["translatedLength"] == len(result.summary)
    assert PipelineStage.TRANSLATED in result.stages


def test_fetch_failure_raises_fetch_error():
    pipeline = DigestPipeline(
        _offline_cfg(),
        fetch=_fetch_returning("not found", status=404),
        extract=_extract_returning(None),
    )

    with pytest.raises(FetchError) as excinfo:
        pipeline.run(DigestRequest(url="https://example.com/missing", language="en"))

    assert excinfo.value.upstream_status == 404
    assert excinfo.value.stage is None


def test_network_failure_raises_fetch_error():
    pipeline = DigestPipeline(
        _offline_cfg(),
        fetch=_fetch_returning(None, status=None, error="ConnectError: connection refused"),
        extract=_extract_returning(None),
    )

    with pytest.raises(FetchError, match="network_failed"):
        pipeline.run(DigestRequest(url="https://example.com/a", language="en"))


@pytest.mark.parametrize(
    "page",
    [
        None,
        ExtractedPage(title="T", text="   "),
        ExtractedPage(title="T", text="Too short."),
        ExtractedPage(title="T", text="Please enable JavaScript to view the content of this page at all."),
    ],
)
def test_unusable_extraction_raises_extraction_error(page):
    pipeline = DigestPipeline(
        _offline_cfg(),
        fetch=_fetch_returning("<html></html>"),
        extract=_extract_returning(page),
    )

    with pytest.raises(ExtractionError):
        pipeline.run(DigestRequest(url="https://example.com/a", language="en"))


def test_digest_article_rejects_short_text():
    pipeline = DigestPipeline(_offline_cfg())
    with pytest.raises(ValidationError):
        pipeline.digest_article(Article(title="T", raw_text="Short."), "en")


def test_expired_deadline_returns_partial_summary_without_remote_calls():
    inference = _FailingInference()
    pipeline = DigestPipeline(AppConfig(), inference=inference, sleep=lambda s: None)
    text = " ".join(_sentences(8))

    result = pipeline.digest_article(
        Article(title="T", raw_text=text),
        "en",
        deadline=Deadline(0.0, clock=lambda: 0.0),
    )

    assert inference.calls == 0
    assert result.meta["deadline_hit"] is True
    assert len(split_sentences(result.summary)) == AppConfig().summary.fallback_sentences


def test_validate_request_accepts_json_and_keeps_language_as_sent():
    request = validate_request('{"url": " https://example.com/a ", "language": " pt-BR "}')
    assert request == DigestRequest(url="https://example.com/a", language="pt-BR")


def test_regional_language_is_echoed_as_sent_and_translated_by_base_language():
    sentences = _sentences(12)
    translation = _DummyTranslation()
    pipeline = DigestPipeline(
        _offline_cfg(),
        translation=translation,
        fetch=_fetch_returning("<html></html>"),
        extract=_extract_returning(ExtractedPage(title="Report", text=" ".join(sentences))),
        sleep=lambda s: None,
    )

    request = validate_request({"url": "https://example.com/a", "language": "pt-BR"})
    result = pipeline.run(request)

    assert result.to_dict()["language"] == "pt-BR"
    assert result.summary.startswith("[pt] ")
    assert translation.calls >= 1


@pytest.mark.parametrize(
    "body",
    [
        "{not json",
        ["https://example.com"],
        {"language": "de"},
        {"url": "https://example.com"},
        {"url": "ftp://example.com/file", "language": "de"},
        {"url": "https://", "language": "de"},
        {"url": "https://example.com", "language": "german language"},
    ],
)
def test_validate_request_rejects_bad_bodies(body):
    with pytest.raises(ValidationError):
        validate_request(body)
